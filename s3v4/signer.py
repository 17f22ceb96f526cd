"""
Provides the string to sign, the signature computation and the header form
of S3 version 4 request signing.

>>> from s3v4 import signature, UNSIGNED_PAYLOAD
>>> sig = signature('https://play.min.io/bucket/key', 'GET', access_key,
...                 secret_key, 'us-east-1', 's3', UNSIGNED_PAYLOAD)
>>> requests.get('https://play.min.io/bucket/key', headers=sig.headers)

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import logging
import re
from collections import namedtuple
from datetime import datetime, timezone

from requests.structures import CaseInsensitiveDict

from .aws4signingkey import (credential_scope, generate_key, sha256_hex,
                             sign_sha256)
from .canonical import canonical_request, host_header, parse_url
from .constants import ALGORITHM, LONG_DATETIME_FMT, SHORT_DATE_FMT
from .exceptions import InvalidDate

logger = logging.getLogger(__name__)

_AMZ_TIMESTAMP_RE = re.compile(r'^\d{8}T\d{6}Z$')


class Signature(namedtuple('Signature', ['auth_header', 'date_time',
                                         'signature', 'signed_headers',
                                         'payload_hash'])):
    """
    Result of signing a request.

    auth_header    -- complete value for the Authorization header
    date_time      -- signing timestamp, YYYYMMDDTHHMMSSZ, for x-amz-date
    signature      -- hex encoded signature
    signed_headers -- ';' separated names of the signed headers
    payload_hash   -- payload hash token used, for x-amz-content-sha256

    """
    __slots__ = ()

    @property
    def headers(self):
        """The headers to attach to the signed request."""
        return {'authorization': self.auth_header,
                'x-amz-date': self.date_time,
                'x-amz-content-sha256': self.payload_hash}


def utcnow():
    return datetime.now(timezone.utc)


def parse_timestamp(date_time):
    """
    Return date_time as a timezone aware UTC datetime.

    date_time -- a datetime (naive values are taken as UTC), or a string in
                 either the YYYYMMDDTHHMMSSZ form or ISO 8601/RFC 3339, e.g.
                 2022-06-14T00:00:00Z

    Raise InvalidDate for anything else.

    """
    if isinstance(date_time, str):
        text = date_time.strip()
        try:
            if _AMZ_TIMESTAMP_RE.match(text):
                date_time = datetime.strptime(text, LONG_DATETIME_FMT)
            else:
                if text[-1:] in ('Z', 'z'):
                    text = text[:-1] + '+00:00'
                date_time = datetime.fromisoformat(text)
        except ValueError as e:
            msg = 'Invalid date {!r}, expected YYYY-MM-DDTHH:MM:SSZ'
            raise InvalidDate(msg.format(date_time), date_time) from e
    if not isinstance(date_time, datetime):
        raise InvalidDate('Expected a datetime or date string, got '
                          '{!r}'.format(date_time), date_time)
    if date_time.tzinfo is None:
        return date_time.replace(tzinfo=timezone.utc)
    return date_time.astimezone(timezone.utc)


def amz_timestamp(date_time):
    """Format a UTC datetime as YYYYMMDDTHHMMSSZ."""
    return date_time.strftime(LONG_DATETIME_FMT)


def get_sig_string(date_time, region, service, cano_req):
    """
    Generate the AWS4 auth string to sign for the request.

    Both the timestamp line and the date of the credential scope come from
    date_time.

    date_time -- signing time, UTC datetime
    cano_req  -- The Canonical Request, as returned by
                 canonical.canonical_request()

    """
    date_time = parse_timestamp(date_time)
    scope = credential_scope(date_time.strftime(SHORT_DATE_FMT), region,
                             service)
    hsh = sha256_hex(cano_req)
    logger.debug('Signing canonical request sha256=%s for scope %s', hsh,
                 scope)
    sig_items = [ALGORITHM, amz_timestamp(date_time), scope, hsh]
    return '\n'.join(sig_items)


def compute_signature(signing_key, sig_string):
    """Return the lower-case hex HMAC-SHA256 of sig_string."""
    return sign_sha256(signing_key, sig_string).hex()


def calculate_signature(cano_req, date_time, secret_key, region, service):
    """
    Run a canonical request through the string to sign, signing key
    derivation and signature computation. Return the hex signature.

    """
    date_time = parse_timestamp(date_time)
    sig_string = get_sig_string(date_time, region, service, cano_req)
    signing_key = generate_key(secret_key, region, service,
                               date_time.strftime(SHORT_DATE_FMT))
    sig = compute_signature(signing_key, sig_string)
    del signing_key
    return sig


def authorization_header(access_key, date_time, region, service,
                         signed_headers, signature):
    """
    Generate the AWS authorization header value.

    date_time -- signing time, UTC datetime

    """
    date_time = parse_timestamp(date_time)
    scope = credential_scope(date_time.strftime(SHORT_DATE_FMT), region,
                             service)
    auth_str = ALGORITHM + ' '
    auth_str += 'Credential={}/{}, '.format(access_key, scope)
    auth_str += 'SignedHeaders={}, '.format(signed_headers)
    auth_str += 'Signature={}'.format(signature)
    return auth_str


def sign(method, payload_hash, url, headers, date_time, secret_key, region,
         service):
    """
    Return the hex signature of a request, signing exactly the headers
    given (plus host, derived from url, if missing).

    An x-amz-date header, if signed, must hold the same time as date_time.

    """
    date_time = parse_timestamp(date_time)
    cano_req, _ = canonical_request(method, url, headers, payload_hash)
    return calculate_signature(cano_req, date_time, secret_key, region,
                               service)


def signature(url, method, access_key, secret_key, region, service,
              payload_hash, date_time=None, headers=None):
    """
    Sign a request with an Authorization header.

    The signed headers are host, x-amz-content-sha256 and x-amz-date, plus
    any extra headers supplied. The request itself must be sent with
    the headers of the returned Signature (see Signature.headers).

    url          -- request URL, must have a scheme and a host
    method       -- HTTP method
    access_key   -- AWS access key ID
    secret_key   -- AWS secret access key
    region       -- region, e.g. us-east-1
    service      -- service, e.g. s3
    payload_hash -- hex SHA256 of the body, or UNSIGNED-PAYLOAD
    date_time    -- signing time, datetime or string. Defaults to now.
    headers      -- extra headers to sign, e.g. range or x-amz-meta-*

    Return a Signature. Raise MalformedUrl or InvalidDate on bad input.

    """
    parts = parse_url(url, require_host=True)
    if date_time is None:
        date_time = utcnow()
    date_time = parse_timestamp(date_time)
    timestamp = amz_timestamp(date_time)
    hdrs = CaseInsensitiveDict(headers or {})
    hdrs['x-amz-content-sha256'] = payload_hash
    hdrs['x-amz-date'] = timestamp
    if 'host' not in hdrs:
        hdrs['host'] = host_header(parts)
    cano_req, signed_headers = canonical_request(method, parts, hdrs,
                                                 payload_hash)
    sig = calculate_signature(cano_req, date_time, secret_key, region,
                              service)
    auth_str = authorization_header(access_key, date_time, region, service,
                                    signed_headers, sig)
    return Signature(auth_str, timestamp, sig, signed_headers, payload_hash)
