"""
Query string signing: generates presigned URLs which can be used without
any extra headers until they expire.

Reference:
https://docs.aws.amazon.com/AmazonS3/latest/API/sigv4-query-string-auth.html

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import logging

from .aws4signingkey import credential_scope
from .canonical import (amz_cano_path, amz_cano_query_pairs,
                        get_canonical_headers, get_canonical_request,
                        host_header, parse_query, parse_url)
from .constants import (ALGORITHM, MAX_EXPIRES, SHORT_DATE_FMT,
                        UNSIGNED_PAYLOAD)
from .exceptions import InvalidExpiration
from .signer import (amz_timestamp, calculate_signature, parse_timestamp,
                     utcnow)

logger = logging.getLogger(__name__)

# Query parameters owned by the signing process. If the URL already carries
# any of them they are replaced.
SIGNING_PARAMS = frozenset(['X-Amz-Algorithm', 'X-Amz-Credential',
                            'X-Amz-Date', 'X-Amz-Expires',
                            'X-Amz-SignedHeaders', 'X-Amz-Signature'])


def check_expiration(expiration_seconds):
    """
    Raise InvalidExpiration unless expiration_seconds is an int between 1
    and MAX_EXPIRES inclusive.

    """
    if (isinstance(expiration_seconds, bool) or
            not isinstance(expiration_seconds, int) or
            not 0 < expiration_seconds <= MAX_EXPIRES):
        msg = ('Expiration must be an integer between 1 and {} seconds, '
               'got {!r}').format(MAX_EXPIRES, expiration_seconds)
        raise InvalidExpiration(msg, expiration_seconds)


def pre_signed_url(access_key, secret_key, expiration_seconds, url, method,
                   payload_hash=UNSIGNED_PAYLOAD, region='us-east-1',
                   date_time=None, service='s3'):
    """
    Generate a presigned URL.

    The signing parameters (X-Amz-Algorithm, X-Amz-Credential, X-Amz-Date,
    X-Amz-Expires and X-Amz-SignedHeaders) are merged with the query of url
    before it is canonicalised, X-Amz-Signature is appended last. Only the
    host header is signed.

    access_key         -- AWS access key ID
    secret_key         -- AWS secret access key
    expiration_seconds -- lifetime of the URL, 1 to 604800 seconds
    url                -- URL of the resource, must have a scheme and host
    method             -- HTTP method the URL will be used with
    payload_hash       -- payload hash for the canonical request, signed as
                          given. S3 only accepts UNSIGNED-PAYLOAD here: a
                          hex digest makes a URL S3 rejects with
                          SignatureDoesNotMatch, so only pass one for
                          servers which verify it.
    region             -- region, e.g. us-east-1
    date_time          -- signing time, datetime or string. Defaults to now.
    service            -- service, e.g. s3

    Raise MalformedUrl, InvalidExpiration or InvalidDate on bad input.

    """
    parts = parse_url(url, require_host=True)
    check_expiration(expiration_seconds)
    if date_time is None:
        date_time = utcnow()
    date_time = parse_timestamp(date_time)
    timestamp = amz_timestamp(date_time)
    scope = credential_scope(date_time.strftime(SHORT_DATE_FMT), region,
                             service)
    host = host_header(parts)

    params = [(name, val) for name, val in parse_query(parts.query)
              if name.decode('latin-1') not in SIGNING_PARAMS]
    params += [('X-Amz-Algorithm', ALGORITHM),
               ('X-Amz-Credential', '{}/{}'.format(access_key, scope)),
               ('X-Amz-Date', timestamp),
               ('X-Amz-Expires', str(expiration_seconds)),
               ('X-Amz-SignedHeaders', 'host')]
    cano_query = amz_cano_query_pairs(params)
    cano_headers, signed_headers = get_canonical_headers({'host': host})
    cano_req = get_canonical_request(method, parts, cano_headers,
                                     signed_headers, payload_hash,
                                     cano_query=cano_query)
    logger.debug('Presigning %s request valid for %ss',
                 method.upper(), expiration_seconds)
    sig = calculate_signature(cano_req, date_time, secret_key, region,
                              service)
    return '{}://{}{}?{}&X-Amz-Signature={}'.format(
        parts.scheme, host, amz_cano_path(parts.path), cano_query, sig)
