import pytest

from pppchap.des import ExpandDesKey, DesEncrypt
from pppchap.errors import LengthError

def reference_expand(key):
  # Textbook 7 -> 8 byte expansion with the parity bits left clear
  s = bytearray()
  s.append(((key[0] >> 1) & 0x7f) << 1)
  s.append(((key[0] & 0x01) << 6 | ((key[1] >> 2) & 0x3f)) << 1)
  s.append(((key[1] & 0x03) << 5 | ((key[2] >> 3) & 0x1f)) << 1)
  s.append(((key[2] & 0x07) << 4 | ((key[3] >> 4) & 0x0f)) << 1)
  s.append(((key[3] & 0x0f) << 3 | ((key[4] >> 5) & 0x07)) << 1)
  s.append(((key[4] & 0x1f) << 2 | ((key[5] >> 6) & 0x03)) << 1)
  s.append(((key[5] & 0x3f) << 1 | ((key[6] >> 7) & 0x01)) << 1)
  s.append((key[6] & 0x7f) << 1)
  return bytes(s)

def test_expand_zero_key():
  assert ExpandDesKey(b"\x00" * 7) == b"\x01" * 8

def test_expand_sets_low_bit_not_odd_parity():
  # 0xff has an even number of ones, odd parity would give 0xfe
  assert ExpandDesKey(b"\xff" * 7) == b"\xff" * 8

@pytest.mark.parametrize("key", [
  bytes.fromhex("0123456789abcd"),
  bytes.fromhex("fc156af7edcd6c"),
  bytes.fromhex("80000000000001"),
])
def test_expand_matches_bit_packing(key):
  expanded = ExpandDesKey(key)
  assert len(expanded) == 8
  assert all(b & 1 for b in expanded)
  assert bytes(b & 0xfe for b in expanded) == reference_expand(key)

def test_expand_rejects_wrong_length():
  with pytest.raises(LengthError):
    ExpandDesKey(b"\x00" * 6)

def test_des_encrypt_single_block():
  out = DesEncrypt(b"KGS!@#$%", b"\x00" * 7)
  assert len(out) == 8
  # Second half of the LM hash of any password of 7 characters or less
  assert out == bytes.fromhex("aad3b435b51404ee")

def test_des_encrypt_rejects_partial_block():
  with pytest.raises(LengthError):
    DesEncrypt(b"short", b"\x00" * 7)
