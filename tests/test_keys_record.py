import hashlib
import unittest
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, timezone

from esnikeys import decode_keys, encode_keys
from esnikeys.codec.tls import write_opaque16
from esnikeys.exceptions import (
    ChecksumMismatch,
    DuplicateKeyType,
    EncodingError,
    InvalidFieldValue,
)
from esnikeys.extensions import AddressSet
from esnikeys.protocol import (
    CipherSuite,
    ESNIKeys,
    Group,
    KeyShareEntry,
    KeyShareEntryList,
    Version,
)

from tests.helpers import NOT_AFTER, NOT_BEFORE, X25519_KEY, CounterExtension, sample_keys


class TestKeysRecord(unittest.TestCase):
    def test_round_trip(self):
        record = sample_keys(
            keys=KeyShareEntryList(
                [
                    KeyShareEntry(Group.X25519, X25519_KEY),
                    KeyShareEntry(Group.SECP256R1, bytes(range(65))),
                ]
            ),
            cipher_suites=[CipherSuite.TLS_AES_128_GCM_SHA256, CipherSuite.TLS_CHACHA20_POLY1305_SHA256],
            extensions=[AddressSet.of("1.2.3.4", "2001:db8::1")],
        )
        data = encode_keys(record)
        decoded = decode_keys(data)
        self.assertEqual(decoded, record)
        self.assertEqual(decoded.checksum, data[2:6])
        self.assertEqual(decoded.not_before, NOT_BEFORE)
        self.assertEqual(decoded.not_after, NOT_AFTER)
        self.assertEqual(decoded.serialize(), data)

    def test_round_trip_draft01_without_public_name(self):
        record = sample_keys(version=Version.DRAFT_01, public_name="")
        self.assertEqual(ESNIKeys.deserialize(record.serialize()), record)

    def test_checksum_is_truncated_sha256_over_zeroed_record(self):
        record = sample_keys()
        data = record.serialize()
        zeroed = data[:2] + b"\x00" * 4 + data[6:]
        self.assertEqual(data[2:6], hashlib.sha256(zeroed).digest()[:4])
        self.assertEqual(record.checksum, data[2:6])

    def test_wire_layout(self):
        data = sample_keys().serialize()
        self.assertEqual(data[:2], b"\xff\x02")
        name = b"cloudflare-esni.com"
        self.assertEqual(data[6], len(name))
        self.assertEqual(data[7 : 7 + len(name)], name)
        off = 7 + len(name)
        self.assertEqual(data[off : off + 2], (4 + 32).to_bytes(2, "big"))
        off += 2 + 36
        self.assertEqual(data[off : off + 4], bytes.fromhex("00021301"))
        off += 4
        self.assertEqual(data[off : off + 2], (260).to_bytes(2, "big"))
        off += 2
        self.assertEqual(data[off : off + 8], (1567296000).to_bytes(8, "big"))
        self.assertEqual(data[off + 8 : off + 16], (1567382400).to_bytes(8, "big"))
        self.assertEqual(data[off + 16 :], b"\x00\x00")

    def test_any_bit_flip_fails_checksum(self):
        data = sample_keys(extensions=[AddressSet.of("1.2.3.4")]).serialize()
        for index in range(len(data)):
            if 2 <= index < 6:
                continue
            for bit in (0x01, 0x80):
                tampered = bytearray(data)
                tampered[index] ^= bit
                with self.assertRaises(ChecksumMismatch):
                    decode_keys(bytes(tampered))

    def test_checksum_mismatch_carries_both_values(self):
        data = bytearray(sample_keys().serialize())
        data[2] ^= 0xFF
        with self.assertRaises(ChecksumMismatch) as cm:
            decode_keys(bytes(data))
        self.assertEqual(cm.exception.received, bytes(data[2:6]))
        self.assertNotEqual(cm.exception.expected, cm.exception.received)

    def test_decode_does_not_mutate_input(self):
        data = bytearray(sample_keys().serialize())
        before = bytes(data)
        decode_keys(data)
        self.assertEqual(bytes(data), before)

    def test_version_gating_omits_public_name(self):
        old = sample_keys(version=Version.DRAFT_01, public_name="ignored.example")
        data = old.serialize()
        keys_blob = write_opaque16(KeyShareEntry(Group.X25519, X25519_KEY).serialize())
        self.assertEqual(data[6 : 6 + len(keys_blob)], keys_blob)
        self.assertNotIn(b"ignored.example", data)
        self.assertEqual(decode_keys(data).public_name, "")

    def test_public_name_required_from_draft03(self):
        with self.assertRaises(InvalidFieldValue) as cm:
            sample_keys(public_name="").serialize()
        self.assertIsInstance(cm.exception, EncodingError)
        self.assertTrue(str(cm.exception).startswith("marshal public name: "))

    def test_public_name_too_large(self):
        sample_keys(public_name="a" * 255).serialize()
        with self.assertRaises(InvalidFieldValue):
            sample_keys(public_name="a" * 256).serialize()

    def test_empty_key_share_list_rejected(self):
        with self.assertRaises(InvalidFieldValue):
            sample_keys(keys=KeyShareEntryList()).serialize()

    def test_duplicate_key_share_rejected_on_encode(self):
        keys = [KeyShareEntry(Group.X25519, b"\x01"), KeyShareEntry(Group.X25519, b"\x02")]
        with self.assertRaises(DuplicateKeyType):
            sample_keys(keys=keys).serialize()

    def test_out_of_range_fields_rejected(self):
        with self.assertRaises(EncodingError) as cm:
            sample_keys(padded_length=0x10000).serialize()
        self.assertIn("write padded length", str(cm.exception))
        with self.assertRaises(InvalidFieldValue):
            sample_keys(not_before=datetime(1960, 1, 1, tzinfo=timezone.utc)).serialize()

    def test_plain_list_of_keys_is_accepted(self):
        record = sample_keys(keys=[KeyShareEntry(Group.X25519, X25519_KEY)])
        self.assertIsInstance(record.keys, KeyShareEntryList)

    def test_naive_timestamps_are_utc(self):
        record = sample_keys(not_before=datetime(2019, 9, 1), not_after=datetime(2019, 9, 2))
        self.assertEqual(record.not_before, NOT_BEFORE)
        self.assertEqual(decode_keys(record.serialize()), record)

    def test_sub_second_timestamps_are_truncated(self):
        record = sample_keys(
            not_before=datetime(2019, 9, 1, 0, 0, 0, 750000, tzinfo=timezone.utc),
            not_after=datetime(2019, 9, 2, 2, 0, 0, 1, tzinfo=timezone(timedelta(hours=2))),
        )
        self.assertEqual(record.not_before, NOT_BEFORE)
        self.assertEqual(record.not_after, NOT_AFTER)
        self.assertEqual(decode_keys(record.serialize()), record)

    def test_address_set_must_be_last(self):
        record = sample_keys(extensions=[AddressSet.of("1.2.3.4"), CounterExtension(7)])
        with self.assertRaises(InvalidFieldValue) as cm:
            record.serialize()
        self.assertTrue(str(cm.exception).startswith("marshal extensions list: "))

    def test_describe(self):
        record = sample_keys(extensions=[AddressSet.of("1.2.3.4")])
        record.serialize()
        text = record.describe()
        self.assertTrue(text.startswith("{Version:draft-ietf-tls-esni-03, Checksum:" + record.checksum.hex()))
        self.assertIn("PublicName:cloudflare-esni.com", text)
        self.assertIn("Keys:[{Group:x25519, Value:" + X25519_KEY.hex() + "}]", text)
        self.assertIn("CipherSuites:[TLS_AES_128_GCM_SHA256]", text)
        self.assertIn("PaddedLength:260", text)
        self.assertIn("NotBefore:2019-09-01T00:00:00+00:00", text)
        self.assertTrue(
            text.endswith("Extensions:[{Type:address_set, Mandatory:True, Value:[IPv4:1.2.3.4]}]}")
        )
        self.assertEqual(str(record), text)

    def test_describe_omits_public_name_before_draft03(self):
        text = sample_keys(version=Version.DRAFT_01).describe()
        self.assertTrue(text.startswith("{Version:draft-ietf-tls-esni-01, Checksum:00000000, Keys:"))
        self.assertNotIn("PublicName", text)

    def test_concurrent_decodes_share_registry(self):
        data = sample_keys(extensions=[AddressSet.of("1.2.3.4")]).serialize()
        with ThreadPoolExecutor(max_workers=4) as pool:
            results = list(pool.map(decode_keys, [data] * 32))
        self.assertTrue(all(r == results[0] for r in results))


if __name__ == "__main__":
    unittest.main()
