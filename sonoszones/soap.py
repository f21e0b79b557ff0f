"""Service resolution and SOAP action invocation."""

import asyncio
import logging
import xml.etree.ElementTree as ET
from xml.sax.saxutils import escape

import aiohttp

from .const import DEFAULT_ACTION_TIMEOUT, SOAP_ENCODING, SOAP_ENV_NS
from .exceptions import CapabilityNotFoundError, RemoteActionError

logger = logging.getLogger(__name__)


def resolve_service(device, service_type):
    """Return the first service on ``device`` implementing ``service_type``."""
    services = device.find_services(service_type)
    if not services:
        raise CapabilityNotFoundError(service_type, device.location)
    return services[0]


def create_soap_body(service_type, action, arguments=None):
    """Build a SOAP envelope for ``action``; arguments are sent in order."""
    body = f"""<?xml version="1.0"?>
<s:Envelope xmlns:s="{SOAP_ENV_NS}" s:encodingStyle="{SOAP_ENCODING}">
    <s:Body>
        <u:{action} xmlns:u="{service_type}">"""

    for key, value in (arguments or {}).items():
        body += f"\n            <{key}>{escape(str(value))}</{key}>"

    body += f"""
        </u:{action}>
    </s:Body>
</s:Envelope>"""

    return body


def create_soap_headers(service_type, action):
    return {
        'Content-Type': 'text/xml; charset="utf-8"',
        'SOAPACTION': f'"{service_type}#{action}"'
    }


def parse_soap_response(document, action):
    """Return the output arguments of ``action`` as a dict of strings.

    ``document`` is the raw reply; bytes are decoded by the XML parser
    according to the document's own encoding declaration.

    Raises:
        xml.etree.ElementTree.ParseError: the reply is not XML
        ValueError: there is no ``<action>Response`` element
    """
    root = ET.fromstring(document)
    element = root.find(f'.//{{*}}{action}Response')
    if element is None:
        raise ValueError(f"no {action}Response element in reply")
    return {child.tag.rsplit('}', 1)[-1]: child.text or "" for child in element}


def parse_soap_fault(document):
    """Return ``(error_code, error_description)`` from a UPnP fault, if any."""
    try:
        root = ET.fromstring(document)
    except ET.ParseError:
        return None, None
    code = root.find('.//{*}errorCode')
    description = root.find('.//{*}errorDescription')
    return (
        code.text if code is not None else None,
        description.text if description is not None else None,
    )


async def invoke(session, device, service_type, action, request=None, timeout=DEFAULT_ACTION_TIMEOUT):
    """Invoke ``action`` on the ``service_type`` service of ``device``.

    ``request`` maps argument names to values; values are stringified and
    escaped. Returns the response arguments. Nothing is retried.

    Raises:
        CapabilityNotFoundError: the device does not offer ``service_type``
        RemoteActionError: transport failure, timeout, SOAP fault or a reply
            that cannot be decoded
    """
    service = resolve_service(device, service_type)
    soap_body = create_soap_body(service_type, action, request)
    headers = create_soap_headers(service_type, action)

    try:
        async with session.post(
            service.control_url,
            data=soap_body.encode('utf-8'),
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=timeout)
        ) as response:
            body = await response.read()
            status = response.status
    except asyncio.TimeoutError as e:
        raise RemoteActionError(action, f"timed out after {timeout}s", cause=e) from e
    except aiohttp.ClientError as e:
        raise RemoteActionError(action, str(e) or type(e).__name__, cause=e) from e

    if status != 200:
        error_code, error_description = parse_soap_fault(body)
        logger.debug(f"{action} on {service.control_url} failed with {status}: {body!r}")
        detail = f"UPnP error {error_code}" if error_code else f"HTTP {status}"
        if error_description:
            detail += f" ({error_description})"
        raise RemoteActionError(
            action,
            detail,
            status=status,
            error_code=error_code,
            error_description=error_description,
        )

    try:
        return parse_soap_response(body, action)
    except (ET.ParseError, ValueError, LookupError) as e:
        raise RemoteActionError(action, f"decoding response: {e}", cause=e, status=status) from e
