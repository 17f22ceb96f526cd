#!/usr/bin/env python
# coding: utf-8

"""
Tests for building the canonical request.

"""

# Licensed under the MIT License:
# http://opensource.org/licenses/MIT


import itertools
import unittest

from s3v4 import MalformedUrl, MissingRequiredHeader, SigningError
from s3v4.aws4signingkey import sha256_hex
from s3v4.canonical import (amz_cano_path, amz_cano_querystring,
                            amz_norm_whitespace, canonical_request,
                            get_canonical_headers, host_header, parse_query,
                            parse_url, url_encode)


class Canonical_UrlEncode_Test(unittest.TestCase):

    def test_unreserved_untouched(self):
        text = 'ABCXYZabcxyz0189-_.~'
        self.assertEqual(url_encode(text), text)

    def test_slash_encoded(self):
        result = url_encode('AKID/20130524/us-east-1/s3/aws4_request')
        self.assertEqual(result,
                         'AKID%2F20130524%2Fus-east-1%2Fs3%2Faws4_request')

    def test_reserved_encoded(self):
        self.assertEqual(url_encode('a b+c=d&e'), 'a%20b%2Bc%3Dd%26e')

    def test_utf8(self):
        self.assertEqual(url_encode('☃'), '%E2%98%83')


class Canonical_ParseUrl_Test(unittest.TestCase):

    def test_parse(self):
        parts = parse_url('https://play.min.io/bucket/key?a=1')
        self.assertEqual(parts.scheme, 'https')
        self.assertEqual(parts.hostname, 'play.min.io')
        self.assertEqual(parts.path, '/bucket/key')
        self.assertEqual(parts.query, 'a=1')

    def test_parsed_url_accepted(self):
        parts = parse_url(parse_url('https://play.min.io/bucket/key'))
        self.assertEqual(parts.hostname, 'play.min.io')

    def test_bad_port(self):
        with self.assertRaises(MalformedUrl) as cm:
            parse_url('http://example.com:abc/')
        self.assertIsInstance(cm.exception.__cause__, ValueError)
        self.assertEqual(cm.exception.value, 'http://example.com:abc/')

    def test_bad_ipv6(self):
        self.assertRaises(MalformedUrl, parse_url, 'http://[::1/key')

    def test_not_a_string(self):
        self.assertRaises(MalformedUrl, parse_url, 42)

    def test_require_host(self):
        self.assertRaises(MalformedUrl, parse_url, 'play.min.io/bucket',
                          require_host=True)
        self.assertRaises(MalformedUrl, parse_url, '/bucket/key',
                          require_host=True)
        self.assertRaises(MalformedUrl, parse_url, 'https:///bucket/key',
                          require_host=True)

    def test_errors_are_value_errors(self):
        self.assertTrue(issubclass(MalformedUrl, SigningError))
        self.assertTrue(issubclass(MalformedUrl, ValueError))


class Canonical_HostHeader_Test(unittest.TestCase):

    def test_default_ports_dropped(self):
        self.assertEqual(host_header(parse_url('https://example.com:443/')),
                         'example.com')
        self.assertEqual(host_header(parse_url('http://example.com:80/')),
                         'example.com')

    def test_other_ports_kept(self):
        self.assertEqual(host_header(parse_url('http://localhost:9000/b')),
                         'localhost:9000')
        self.assertEqual(host_header(parse_url('https://example.com:80/')),
                         'example.com:80')

    def test_lower_case(self):
        self.assertEqual(host_header(parse_url('http://Example.COM/')),
                         'example.com')

    def test_ipv6(self):
        self.assertEqual(host_header(parse_url('http://[::1]:8080/')),
                         '[::1]:8080')

    def test_no_host(self):
        self.assertIsNone(host_header(parse_url('/bucket/key')))


class Canonical_Path_Test(unittest.TestCase):

    def test_empty(self):
        self.assertEqual(amz_cano_path(''), '/')

    def test_root(self):
        self.assertEqual(amz_cano_path('/'), '/')

    def test_plain(self):
        self.assertEqual(amz_cano_path('/bucket/key'), '/bucket/key')

    def test_case_preserved(self):
        self.assertEqual(amz_cano_path('/Bucket/Key.TXT'), '/Bucket/Key.TXT')

    def test_space_encoded(self):
        self.assertEqual(amz_cano_path('/bucket/my key.txt'),
                         '/bucket/my%20key.txt')

    def test_not_double_encoded(self):
        self.assertEqual(amz_cano_path('/bucket/my%20key.txt'),
                         '/bucket/my%20key.txt')

    def test_encoded_slash_kept_in_segment(self):
        self.assertEqual(amz_cano_path('/bucket/a%2Fb'), '/bucket/a%2Fb')

    def test_reserved_encoded(self):
        self.assertEqual(amz_cano_path('/bucket/a+b=c'), '/bucket/a%2Bb%3Dc')

    def test_unreserved(self):
        self.assertEqual(amz_cano_path('/bucket/a-b_c.d~e'),
                         '/bucket/a-b_c.d~e')

    def test_not_normalised(self):
        self.assertEqual(amz_cano_path('/bucket/../x//y/'),
                         '/bucket/../x//y/')

    def test_utf8(self):
        self.assertEqual(amz_cano_path('/bucket/☃'), '/bucket/%E2%98%83')

    def test_invalid_utf8_escape_kept(self):
        self.assertEqual(amz_cano_path('/bucket/%FF'), '/bucket/%FF')
        self.assertEqual(amz_cano_path('/b/a%ff%C3%A9'), '/b/a%FF%C3%A9')


class Canonical_Querystring_Test(unittest.TestCase):

    def test_empty(self):
        self.assertEqual(amz_cano_querystring(''), '')

    def test_sorted(self):
        self.assertEqual(amz_cano_querystring('b=2&a=1&c=3'), 'a=1&b=2&c=3')

    def test_blank_value(self):
        self.assertEqual(amz_cano_querystring('uploads'), 'uploads=')
        self.assertEqual(amz_cano_querystring('acl=&b=1'), 'acl=&b=1')

    def test_repeated_keys_sorted_by_value(self):
        self.assertEqual(amz_cano_querystring('a=2&a=1&a='), 'a=&a=1&a=2')

    def test_sorted_by_key_before_value(self):
        # A plain sort of the joined 'key=value' strings would put 'a-b=1'
        # first, since '-' < '='
        self.assertEqual(amz_cano_querystring('a-b=1&a=2'), 'a=2&a-b=1')

    def test_values_encoded(self):
        self.assertEqual(amz_cano_querystring('prefix=photos/2024 x'),
                         'prefix=photos%2F2024%20x')

    def test_already_encoded_values(self):
        self.assertEqual(amz_cano_querystring('prefix=photos%2F2024%20x'),
                         'prefix=photos%2F2024%20x')

    def test_plus_is_space(self):
        self.assertEqual(amz_cano_querystring('q=a+b'), 'q=a%20b')

    def test_invalid_utf8_escape_kept(self):
        self.assertEqual(amz_cano_querystring('k=%FF'), 'k=%FF')
        self.assertEqual(amz_cano_querystring('%FE=%ff&a=1'), '%FE=%FF&a=1')

    def test_parse_query_bytes(self):
        self.assertEqual(parse_query('k=%FF&acl&&q=a+b%2B'),
                         [(b'k', b'\xff'), (b'acl', b''), (b'q', b'a b+')])

    def test_keys_encoded(self):
        self.assertEqual(amz_cano_querystring('a%20b=1'), 'a%20b=1')

    def test_insertion_order_independent(self):
        pairs = ['list-type=2', 'prefix=a', 'max-keys=10', 'a=', 'a=z']
        expected = 'a=&a=z&list-type=2&max-keys=10&prefix=a'
        for perm in itertools.permutations(pairs):
            qs = '&'.join(perm)
            self.assertEqual(amz_cano_querystring(qs), expected, msg=qs)


class Canonical_GetCanonicalHeaders_Test(unittest.TestCase):

    def test_headers_amz_example(self):
        """
        Using example from:
        http://docs.aws.amazon.com/general/latest/gr/sigv4-create-canonical-request.html

        """
        hdr_text = [
            'host:iam.amazonaws.com',
            'Content-type:application/x-www-form-urlencoded; charset=utf-8',
            'My-header1:    a   b   c ',
            'x-amz-date:20120228T030031Z',
            'My-Header2:    "a   b   c"']
        headers = dict([item.split(':') for item in hdr_text])
        result = get_canonical_headers(headers)
        cano_headers, signed_headers = result
        expected = [
            'content-type:application/x-www-form-urlencoded; charset=utf-8',
            'host:iam.amazonaws.com',
            'my-header1:a b c',
            'my-header2:"a b c"',
            'x-amz-date:20120228T030031Z']
        expected = '\n'.join(expected) + '\n'
        self.assertEqual(cano_headers, expected)
        expected = 'content-type;host;my-header1;my-header2;x-amz-date'
        self.assertEqual(signed_headers, expected)

    def test_duplicate_headers(self):
        """
        Tests case of duplicate headers with different cased names. Values
        are merged in the order they are given.

        """
        headers = {'ZOO': 'zoobar',
                   'FOO': 'zoobar',
                   'zoo': 'foobar',
                   'Content-Type': 'text/plain',
                   'host': 'dummy'}
        include = [x for x in headers if x != 'Content-Type']
        result = get_canonical_headers(headers, include=include)
        cano_headers, signed_headers = result
        cano_expected = 'foo:zoobar\nhost:dummy\nzoo:zoobar,foobar\n'
        signed_expected = 'foo;host;zoo'
        self.assertEqual(cano_headers, cano_expected)
        self.assertEqual(signed_headers, signed_expected)

    def test_list_values(self):
        headers = {'host': 'h', 'x-amz-meta-list': ['a   b', ' c ']}
        cano_headers, _ = get_canonical_headers(headers)
        self.assertEqual(cano_headers, 'host:h\nx-amz-meta-list:a b,c\n')

    def test_pairs_accepted(self):
        headers = [('Host', 'h'), ('X-Amz-Meta-A', '1'), ('x-amz-meta-a', '2')]
        cano_headers, signed_headers = get_canonical_headers(headers)
        self.assertEqual(cano_headers, 'host:h\nx-amz-meta-a:1,2\n')
        self.assertEqual(signed_headers, 'host;x-amz-meta-a')

    def test_include_amz_wildcard(self):
        headers = {'Host': 'h',
                   'X-Amz-Meta-Foo': 'bar',
                   'X-Amz-Client-Context': 'ctx',
                   'Range': 'bytes=0-9'}
        result = get_canonical_headers(headers, include=['x-amz-*'])
        self.assertEqual(result, ('host:h\nx-amz-meta-foo:bar\n',
                                  'host;x-amz-meta-foo'))

    def test_include_all_wildcard(self):
        headers = {'Host': 'h', 'Range': 'bytes=0-9'}
        result = get_canonical_headers(headers, include=['*'])
        self.assertEqual(result[1], 'host;range')

    def test_host_always_included(self):
        headers = {'Host': 'h', 'Range': 'bytes=0-9'}
        result = get_canonical_headers(headers, include=[])
        self.assertEqual(result, ('host:h\n', 'host'))

    def test_missing_host(self):
        self.assertRaises(MissingRequiredHeader, get_canonical_headers,
                          {'x-amz-date': '20130524T000000Z'})

    def test_norm_whitespace(self):
        self.assertEqual(amz_norm_whitespace('  a \t b\n  c  '), 'a b c')


class Canonical_CanonicalRequest_Test(unittest.TestCase):

    def test_amz1(self):
        """
        Using example data selected from:
        http://docs.aws.amazon.com/general/latest/gr/sigv4-create-canonical-request.html

        """
        headers = {'Host': 'iam.amazonaws.com',
                   'Content-Type': 'application/x-www-form-urlencoded',
                   'X-Amz-Date': '20110909T233600Z'}
        payload_hash = sha256_hex('Action=ListUsers&Version=2010-05-08')
        expected = [
            'POST',
            '/',
            '',
            'content-type:application/x-www-form-urlencoded',
            'host:iam.amazonaws.com',
            'x-amz-date:20110909T233600Z',
            '',
            'content-type;host;x-amz-date',
            'b6359072c78d70ebee1e81adcbab4f01bf2c23245fa365ef83fe8f1f95'
            '5085e2']
        expected = '\n'.join(expected)
        cano_req, signed_headers = canonical_request(
            'post', 'https://iam.amazonaws.com/', headers, payload_hash)
        self.assertEqual(cano_req, expected)
        self.assertEqual(signed_headers, 'content-type;host;x-amz-date')

    def test_s3_get_object(self):
        """
        Using the GET Object example from:
        https://docs.aws.amazon.com/AmazonS3/latest/API/sig-v4-header-based-auth.html

        """
        empty = ('e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b'
                 '7852b855')
        headers = {'Range': 'bytes=0-9',
                   'x-amz-content-sha256': empty,
                   'x-amz-date': '20130524T000000Z'}
        expected = '\n'.join([
            'GET',
            '/test.txt',
            '',
            'host:examplebucket.s3.amazonaws.com',
            'range:bytes=0-9',
            'x-amz-content-sha256:' + empty,
            'x-amz-date:20130524T000000Z',
            '',
            'host;range;x-amz-content-sha256;x-amz-date',
            empty])
        cano_req, _ = canonical_request(
            'GET', 'https://examplebucket.s3.amazonaws.com/test.txt',
            headers, empty)
        self.assertEqual(cano_req, expected)

    def test_query_included(self):
        cano_req, _ = canonical_request(
            'GET', 'https://h/bucket?prefix=a b&list-type=2', {},
            'UNSIGNED-PAYLOAD')
        self.assertEqual(cano_req.split('\n')[2],
                         'list-type=2&prefix=a%20b')

    def test_host_derived_with_port(self):
        cano_req, _ = canonical_request('GET', 'http://localhost:9000/b/k',
                                        {}, 'UNSIGNED-PAYLOAD')
        self.assertIn('\nhost:localhost:9000\n', cano_req)

    def test_explicit_host_wins(self):
        cano_req, _ = canonical_request('GET', 'http://localhost:9000/b/k',
                                        {'HOST': 'example.com'},
                                        'UNSIGNED-PAYLOAD')
        self.assertIn('\nhost:example.com\n', cano_req)
        self.assertNotIn('localhost', cano_req)

    def test_relative_url_needs_host(self):
        self.assertRaises(MissingRequiredHeader, canonical_request, 'GET',
                          '/bucket/key', {}, 'UNSIGNED-PAYLOAD')
        cano_req, _ = canonical_request('GET', '/bucket/key', {'host': 'h'},
                                        'UNSIGNED-PAYLOAD')
        self.assertTrue(cano_req.startswith('GET\n/bucket/key\n\nhost:h\n'))

    def test_malformed_url(self):
        self.assertRaises(MalformedUrl, canonical_request, 'GET',
                          'http://h:port/', {}, 'UNSIGNED-PAYLOAD')


if __name__ == '__main__':
    unittest.main()
