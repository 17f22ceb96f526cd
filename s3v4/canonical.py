"""
Builds the Canonical Request of AWS Signature Version 4 as used by S3.

The canonical request is the exact byte sequence that gets hashed into the
string to sign:

    METHOD
    CANONICAL_URI
    CANONICAL_QUERY
    name:value       (one line per signed header, sorted by name)

    SIGNED_HEADERS
    PAYLOAD_HASH

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import logging
from urllib.parse import urlsplit, quote, unquote_to_bytes

from .exceptions import MalformedUrl, MissingRequiredHeader

logger = logging.getLogger(__name__)

DEFAULT_PORTS = {'http': 80, 'https': 443}


def url_encode(text):
    """
    Percent-encode text leaving only the unreserved characters
    A-Z a-z 0-9 - _ . ~ as they are. '/' is encoded too.

    text -- str, encoded as UTF-8, or bytes, encoded as they are

    """
    if not isinstance(text, bytes):
        text = str(text)
    return quote(text, safe='')


def parse_url(url, require_host=False):
    """
    Split url into its components.

    Raise MalformedUrl if the URL can't be parsed, or if require_host is set
    and the URL has no scheme or host.

    url -- URL string, or an already parsed urllib SplitResult/ParseResult

    """
    if not isinstance(url, str):
        if not hasattr(url, 'geturl'):
            raise MalformedUrl('Expected a URL string, got {!r}'.format(url),
                               url)
        url = url.geturl()
    try:
        parts = urlsplit(url)
        # port and hostname are parsed lazily, force the checks now
        parts.port
        parts.hostname
    except ValueError as e:
        raise MalformedUrl('Error parsing url {!r}: {}'.format(url, e),
                           url) from e
    if require_host and not (parts.scheme and parts.hostname):
        raise MalformedUrl('URL {!r} has no scheme or host'.format(url), url)
    return parts


def host_header(parts):
    """
    Return the Host header value for a parsed URL, or None if the URL has no
    host.

    The port is only included when it isn't the default one for the scheme,
    which is what HTTP clients send.

    """
    host = parts.hostname
    if not host:
        return None
    if ':' in host:
        host = '[{}]'.format(host)
    port = parts.port
    if port is not None and DEFAULT_PORTS.get(parts.scheme) != port:
        host = '{}:{}'.format(host, port)
    return host


def amz_cano_path(path):
    """
    Generate the canonical URI as per S3 SigV4 requirements.

    Each segment is decoded then encoded once, so a request path that is
    already percent-encoded and one that isn't give the same result. An
    encoded slash (%2F) stays part of its segment. S3 object keys are not
    normalised: '.', '..' and repeated slashes are kept. Escapes are
    decoded to bytes, so ones which aren't valid UTF-8 (%FF) come out
    unchanged.

    path -- request path

    """
    if not path:
        return '/'
    if not path.startswith('/'):
        path = '/' + path
    return '/'.join(url_encode(unquote_to_bytes(seg))
                    for seg in path.split('/'))


def parse_query(qs):
    """
    Split querystring qs into a list of decoded (name, value) bytes pairs.

    '+' is a space. A parameter without '=' gets an empty value, empty
    parameters are dropped. Escapes are decoded to bytes rather than text so
    none are lost.

    """
    pairs = []
    for item in qs.split('&'):
        if not item:
            continue
        name, _, val = item.replace('+', ' ').partition('=')
        pairs.append((unquote_to_bytes(name), unquote_to_bytes(val)))
    return pairs


def amz_cano_query_pairs(pairs):
    """
    Encode and sort already decoded (name, value) pairs into a canonical
    query string. Names and values may be str or bytes.

    Pairs are ordered by encoded name, then by encoded value. Repeated names
    are all kept.

    """
    encoded = [(url_encode(name), url_encode(val)) for name, val in pairs]
    return '&'.join('='.join(item) for item in sorted(encoded))


def amz_cano_querystring(qs):
    """
    Parse and format querystring as per AWS4 auth requirements.

    Perform percent quoting as needed.

    qs -- querystring, without the leading '?'

    """
    return amz_cano_query_pairs(parse_query(qs))


def amz_norm_whitespace(text):
    """
    Strip text and replace internal runs of whitespace with a single space.

    """
    return ' '.join(str(text).split())


def header_included(hdr, include):
    """
    Return True if the lower-cased header name hdr is matched by the include
    filter, see get_canonical_headers().

    """
    if include is None or hdr == 'host':
        return True
    return (hdr in include or '*' in include or
            ('x-amz-*' in include and hdr.startswith('x-amz-') and not
             hdr == 'x-amz-client-context'))


def get_canonical_headers(headers, include=None):
    """
    Generate the Canonical Headers section of the Canonical Request.

    Return the Canonical Headers and the Signed Headers strs as a tuple
    (canonical_headers, signed_headers).

    headers -- mapping (or iterable of pairs) of header names to values.
               A value may be a list or tuple, its items are joined with
               commas.
    include -- Names of the headers to sign. 'x-amz-*' matches every
               x-amz- header except x-amz-client-context, '*' matches all.
               host is always signed. If omitted or None every header is
               signed.

    Raise MissingRequiredHeader if there is no host header.

    """
    if include is not None:
        include = {x.lower() for x in include}
    items = headers.items() if hasattr(headers, 'items') else headers
    # Header names differing only by case are merged into a single header
    # with the values comma separated, in the order they were given
    cano_headers_dict = {}
    for hdr, val in items:
        hdr = hdr.strip().lower()
        if not header_included(hdr, include):
            continue
        if isinstance(val, (list, tuple)):
            val = ','.join(amz_norm_whitespace(v) for v in val)
        else:
            val = amz_norm_whitespace(val)
        cano_headers_dict.setdefault(hdr, []).append(val)
    if not any(cano_headers_dict.get('host', [])):
        raise MissingRequiredHeader('The host header is required for '
                                    'signing', headers)
    cano_headers = ''
    signed_headers_list = []
    for hdr in sorted(cano_headers_dict):
        val = ','.join(cano_headers_dict[hdr])
        cano_headers += '{}:{}\n'.format(hdr, val)
        signed_headers_list.append(hdr)
    signed_headers = ';'.join(signed_headers_list)
    return (cano_headers, signed_headers)


def get_canonical_request(method, url, cano_headers, signed_headers,
                          payload_hash, cano_query=None):
    """
    Create the AWS authentication Canonical Request string.

    method         -- HTTP method
    url            -- request URL, string or parsed
    cano_headers   -- Canonical Headers section of Canonical Request, as
                      returned by get_canonical_headers()
    signed_headers -- Signed Headers, as returned by
                      get_canonical_headers()
    payload_hash   -- hex SHA256 of the body, or UNSIGNED-PAYLOAD
    cano_query     -- canonical query string to use instead of the one built
                      from the query of url

    """
    parts = parse_url(url)
    path = amz_cano_path(parts.path)
    qs = cano_query
    if qs is None:
        qs = amz_cano_querystring(parts.query)
    req_parts = [method.upper(), path, qs, cano_headers,
                 signed_headers, payload_hash]
    return '\n'.join(req_parts)


def add_host_header(headers, url):
    """
    Return the header items with a host header derived from url appended,
    unless headers already has one.

    Raise MissingRequiredHeader if there is no host header and the URL has no
    host either.

    """
    items = list(headers.items() if hasattr(headers, 'items') else headers)
    if any(hdr.strip().lower() == 'host' for hdr, _ in items):
        return items
    host = host_header(parse_url(url))
    if host is None:
        raise MissingRequiredHeader('No host header given and none can be '
                                    'derived from {!r}'.format(url), url)
    items.append(('host', host))
    return items


def canonical_request(method, url, headers, payload_hash, include=None):
    """
    Build the Canonical Request for a request.

    Return the canonical request and the signed headers as a tuple
    (canonical_request, signed_headers).

    method       -- HTTP method
    url          -- request URL, string or parsed
    headers      -- mapping of the headers to sign. If there's no host header
                    one is derived from url.
    payload_hash -- hex SHA256 of the body, or UNSIGNED-PAYLOAD
    include      -- optional header filter, see get_canonical_headers()

    """
    items = add_host_header(headers, url)
    cano_headers, signed_headers = get_canonical_headers(items, include)
    cano_req = get_canonical_request(method, url, cano_headers,
                                     signed_headers, payload_hash)
    logger.debug('Signed headers: %s', signed_headers)
    return (cano_req, signed_headers)