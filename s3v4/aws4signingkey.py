"""
Hashing primitives and AWS version 4 signing key derivation.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import hmac
import hashlib


def _to_bytes(msg):
    if isinstance(msg, str):
        msg = msg.encode('utf-8')
    return msg


def sha256_hex(data):
    """
    Return the lower-case hex SHA256 digest of data, encoding it to UTF-8
    if not already encoded.

    """
    return hashlib.sha256(_to_bytes(data)).hexdigest()


def sign_sha256(key, msg):
    """
    Generate an SHA256 HMAC, encoding msg to UTF-8 if not
    already encoded.

    key -- signing key. bytes.
    msg -- message to sign. unicode or bytes.

    """
    return hmac.new(key, _to_bytes(msg), hashlib.sha256).digest()


def credential_scope(date, region, service):
    """
    Return the credential scope string date/region/service/aws4_request.

    date -- 8-digit date of the form YYYYMMDD

    """
    return '{}/{}/{}/aws4_request'.format(date, region, service)


def generate_key(secret_key, region, service, date, intermediate=False):
    """
    Generate the signing key as bytes.

    The key is recomputed on every call, nothing is cached between calls.

    If intermediate is set to True, returns a 4-tuple containing the key
    and the intermediate keys:

    ( signing_key, date_key, region_key, service_key )

    The intermediate keys can be used for testing against example from
    Amazon.

    secret_key -- AWS secret access key
    region     -- region the key is scoped for, e.g. us-east-1
    service    -- service the key is scoped for, e.g. s3
    date       -- 8-digit date of the form YYYYMMDD

    """
    init_key = ('AWS4' + secret_key).encode('utf-8')
    date_key = sign_sha256(init_key, date)
    region_key = sign_sha256(date_key, region)
    service_key = sign_sha256(region_key, service)
    key = sign_sha256(service_key, 'aws4_request')
    if intermediate:
        return (key, date_key, region_key, service_key)
    else:
        return key
