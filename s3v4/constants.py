"""
Fixed values of the AWS Signature Version 4 protocol.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


ALGORITHM = 'AWS4-HMAC-SHA256'

# Payload hash sentinel for bodies that are not hashed at signing time
UNSIGNED_PAYLOAD = 'UNSIGNED-PAYLOAD'

# sha256(b'')
EMPTY_SHA256 = ('e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b'
                '7852b855')

# Longest lifetime S3 accepts for a presigned URL, in seconds (7 days)
MAX_EXPIRES = 7 * 24 * 60 * 60

LONG_DATETIME_FMT = '%Y%m%dT%H%M%SZ'
SHORT_DATE_FMT = '%Y%m%d'
