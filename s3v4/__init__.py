"""
AWS Signature Version 4 signing for S3 and S3 compatible object storage.

Features
--------
* Authorization header signing of requests
* Presigned URL generation (query string authentication)
* Requests_ authentication class
* All signing functions are pure: the same inputs, including the timestamp,
  always give the same output

.. _Requests: https://github.com/psf/requests

No network requests are made by this package, sending the signed request is
up to the caller.

Installation
------------
Install via pip:

.. code-block:: bash

    $ pip install s3v4

Header signing
--------------
.. code-block:: python

    >>> import requests
    >>> from s3v4 import signature, UNSIGNED_PAYLOAD
    >>> url = 'https://play.min.io/bucket/key'
    >>> sig = signature(url, 'GET', access_key, secret_key, 'us-east-1',
    ...                 's3', UNSIGNED_PAYLOAD)
    >>> response = requests.get(url, headers=sig.headers)

``sig.headers`` holds the ``authorization``, ``x-amz-date`` and
``x-amz-content-sha256`` headers the request must be sent with. Pass
``date_time`` to sign for a given time instead of now, and ``headers`` to sign
extra headers such as ``range`` or ``x-amz-meta-*``.

Presigned URLs
--------------
.. code-block:: python

    >>> from s3v4 import pre_signed_url, UNSIGNED_PAYLOAD
    >>> url = pre_signed_url(access_key, secret_key, 3600,
    ...                      'https://play.min.io/bucket/key', 'GET',
    ...                      UNSIGNED_PAYLOAD, 'us-east-1', None, 's3')

The URL is valid for ``expiration_seconds`` (at most 7 days, 604800 seconds)
and needs no extra headers.

``S3V4Auth`` objects
--------------------
.. code-block:: python

    >>> from s3v4 import S3V4Auth
    >>> auth = S3V4Auth(access_key, secret_key, 'us-east-1')
    >>> response = requests.put(url, data=b'hello', auth=auth)

Errors
------
Bad input raises a subclass of ``SigningError`` (itself a ``ValueError``):
``MalformedUrl``, ``InvalidDate``, ``InvalidExpiration`` or
``MissingRequiredHeader``.

Multi-threading / processing
----------------------------
Nothing is cached or shared between calls, all functions can be called from
any number of threads.

Unsupported features
--------------------
* Chunked (streaming) payload signing
* Signature versions other than 4

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


from .auth import S3V4Auth
from .canonical import url_encode
from .constants import (ALGORITHM, EMPTY_SHA256, LONG_DATETIME_FMT,
                        MAX_EXPIRES, SHORT_DATE_FMT, UNSIGNED_PAYLOAD)
from .exceptions import (SigningError, MalformedUrl, InvalidDate,
                         InvalidExpiration, MissingRequiredHeader)
from .presign import pre_signed_url
from .signer import Signature, authorization_header, sign, signature

__version__ = '0.3.5'
