"""Smart HTTP client for fetching from a remote repository.

Only the parts of the protocol needed for a full clone of one ref are
spoken: ref discovery, and a single ``want`` answered by a NAK followed by
the pack. Multi-ack negotiation and side-band progress are not requested.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List

import requests

from plumb.core.errors import ProtocolError
from plumb.core.objects import PlumbObject
from plumb.core.pack import parse_pack

logger = logging.getLogger(__name__)

FLUSH_PKT = '0000'
NAK_LINE = b'0008NAK\n'
UPLOAD_PACK_REQUEST = 'application/x-git-upload-pack-request'


@dataclass
class Ref:
    """A reference advertised by the remote."""

    hash: str
    name: str


def pkt_line(payload: str) -> str:
    """
    Frame one line of the protocol.

    The 4 hex digit prefix counts itself, the payload and the trailing
    newline.
    """
    return f"{len(payload) + 5:04x}{payload}\n"


def upload_pack_request(wanted_hash: str) -> str:
    """Build the request body asking for everything reachable from wanted_hash."""
    return pkt_line(f"want {wanted_hash}") + FLUSH_PKT + pkt_line('done')


def _endpoint(url: str, path: str) -> str:
    return f"{url.rstrip('/')}/{path}"


def _check_response(response: requests.Response, url: str) -> None:
    if not 200 <= response.status_code < 300:
        raise ProtocolError(f"HTTP {response.status_code} from {url}")


def parse_ref_advertisement(body: str) -> List[Ref]:
    """
    Parse the body of an info/refs response.

    The first line is the service banner and is skipped; parsing stops at
    the flush line, alone or glued to the banner's flush when no refs are
    advertised. A ref line may carry the banner's flush and always
    carries its own 4-digit length, both of which are stripped along with
    any NUL-separated capability list.
    """
    refs = []
    for line in body.split('\n')[1:]:
        if line == FLUSH_PKT:
            break
        if not line:
            continue

        ref_data = line.split('\0', 1)[0]
        if ref_data.startswith(FLUSH_PKT):
            ref_data = ref_data[len(FLUSH_PKT):]
        if ref_data == FLUSH_PKT:
            break
        ref_data = ref_data[4:]

        obj_hash, sep, name = ref_data.partition(' ')
        if not sep or len(obj_hash) != 40 or not name:
            raise ProtocolError(f"Malformed ref advertisement line: {line!r}")
        refs.append(Ref(obj_hash, name))

    return refs


def get_refs(url: str) -> List[Ref]:
    """
    Discover the refs a remote advertises.

    Args:
        url: Repository URL (e.g. https://host/user/repo.git)

    Returns:
        Refs in advertised order; the first is what HEAD points to

    Raises:
        ProtocolError: On transport failure or malformed advertisement
    """
    refs_url = _endpoint(url, 'info/refs?service=git-upload-pack')
    logger.debug("Discovering refs at %s", refs_url)
    try:
        response = requests.get(refs_url)
    except requests.RequestException as e:
        raise ProtocolError(f"Failed to fetch refs from {url}: {e}") from e
    _check_response(response, refs_url)

    refs = parse_ref_advertisement(response.text)
    logger.debug("Remote advertised %d refs", len(refs))
    return refs


def fetch_pack(url: str, wanted_hash: str) -> bytes:
    """
    Request the pack for wanted_hash and return its raw bytes.

    Raises:
        ProtocolError: On transport failure or if the response does not
            open with a NAK
    """
    pack_url = _endpoint(url, 'git-upload-pack')
    logger.debug("Requesting pack for %s from %s", wanted_hash, pack_url)
    try:
        response = requests.post(
            pack_url,
            data=upload_pack_request(wanted_hash).encode(),
            headers={'Content-Type': UPLOAD_PACK_REQUEST},
        )
    except requests.RequestException as e:
        raise ProtocolError(f"Failed to fetch pack from {url}: {e}") from e
    _check_response(response, pack_url)

    body = response.content
    nak = body[:len(NAK_LINE)]
    if nak != NAK_LINE:
        raise ProtocolError(f"No NAK header in response: {nak!r}")

    logger.debug("Received %d pack bytes", len(body) - len(NAK_LINE))
    return body[len(NAK_LINE):]


def fetch_ref(url: str, wanted_hash: str) -> Dict[str, PlumbObject]:
    """Fetch and decode every object reachable from wanted_hash."""
    return parse_pack(fetch_pack(url, wanted_hash))
