"""
Provides S3V4Auth class for signing requests made with the Requests module
using S3 version 4 authentication.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


from requests.auth import AuthBase

from .aws4signingkey import sha256_hex
from .canonical import header_included
from .constants import UNSIGNED_PAYLOAD
from .signer import signature


class S3V4Auth(AuthBase):
    """
    Requests authentication class for providing S3 version 4 header
    authentication for HTTP requests.

    You can reuse S3V4Auth instances to sign as many requests as you need.
    Every request is signed with the time it is sent at, unless it already
    carries an X-Amz-Date header.

    Basic usage
    -----------

    >>> import requests
    >>> from s3v4 import S3V4Auth
    >>> auth = S3V4Auth('<ACCESS KEY>', '<SECRET KEY>', 'us-east-1')
    >>> response = requests.get('https://play.min.io/bucket/key', auth=auth)

    Class attributes
    ----------------

    S3V4Auth.access_key       -- the access key ID supplied to the instance
    S3V4Auth.region           -- the region for the instance
    S3V4Auth.service          -- the service for this instance
    S3V4Auth.include_hdrs     -- set of request headers to sign
    S3V4Auth.unsigned_payload -- sign with UNSIGNED-PAYLOAD instead of
                                 hashing the body

    """

    default_include_headers = {'host', 'content-type', 'x-amz-*'}

    def __init__(self, access_key, secret_key, region, service='s3',
                 include_hdrs=None, unsigned_payload=False):
        """
        >>> auth = S3V4Auth(access_key, secret_key, region[, service])

        access_key       -- This is your AWS access key ID
        secret_key       -- This is your AWS secret access key
        region           -- The region you're connecting to, e.g. us-east-1
        service          -- The service name, s3 by default
        include_hdrs     -- Names of the request headers to sign, see
                            canonical.get_canonical_headers(). host,
                            x-amz-date and x-amz-content-sha256 are always
                            signed.
        unsigned_payload -- If True the body is not hashed and
                            UNSIGNED-PAYLOAD is signed instead. Bodies which
                            can't be hashed up front (files, generators) are
                            always sent unsigned.

        """
        self.access_key = access_key
        self.secret_key = secret_key
        self.region = region
        self.service = service
        if include_hdrs is None:
            include_hdrs = self.default_include_headers
        self.include_hdrs = {x.lower() for x in include_hdrs}
        self.unsigned_payload = unsigned_payload

    def __call__(self, req):
        """
        Interface used by Requests module to apply authentication to HTTP
        requests.

        Add x-amz-content-sha256, x-amz-date and Authorization headers to the
        request. An X-Amz-Date header already present is used as the signing
        time.

        If request body is not already encoded to bytes, encode to charset
        specified in Content-Type header, or UTF-8 if not specified.

        req -- Requests PreparedRequest object

        """
        if getattr(req, 'body', None) is not None:
            self.encode_body(req)
        payload_hash = self.get_payload_hash(req)
        date_time = req.headers.get('x-amz-date')
        headers = {hdr: val for hdr, val in req.headers.items()
                   if header_included(hdr.lower(), self.include_hdrs)}
        sig = signature(req.url, req.method, self.access_key,
                        self.secret_key, self.region, self.service,
                        payload_hash, date_time=date_time, headers=headers)
        req.headers['X-Amz-Content-SHA256'] = sig.payload_hash
        req.headers['X-Amz-Date'] = sig.date_time
        req.headers['Authorization'] = sig.auth_header
        return req

    def get_payload_hash(self, req):
        """
        Return the payload hash token for the body of req.

        """
        body = getattr(req, 'body', None)
        if body is None:
            body = b''
        if self.unsigned_payload or not isinstance(body, bytes):
            return UNSIGNED_PAYLOAD
        return sha256_hex(body)

    @staticmethod
    def encode_body(req):
        """
        Encode body of request to bytes and update content-type if required.

        If the body of req is unicode then encode to the charset parameter of
        the content-type header if present, otherwise UTF-8, or ASCII if
        content-type is application/x-www-form-urlencoded. If encoding to UTF-8
        then add a charset parameter to content-type, keeping any others.
        Modifies req directly, does not return a modified copy.

        req -- Requests PreparedRequest object

        """
        if isinstance(req.body, str):
            content_type = req.headers.get('content-type', 'text/plain')
            split = [x.strip() for x in content_type.split(';')]
            ct, params = split[0], [p for p in split[1:] if p]
            charsets = [p.partition('=')[2].strip('"') for p in params
                        if p.partition('=')[0].strip().lower() == 'charset']
            if charsets:
                req.body = req.body.encode(charsets[0])
            elif (ct == 'application/x-www-form-urlencoded' or
                    'x-amz-' in ct):
                req.body = req.body.encode()
            else:
                req.body = req.body.encode('utf-8')
                req.headers['content-type'] = '; '.join(
                    [ct] + params + ['charset=utf-8'])
