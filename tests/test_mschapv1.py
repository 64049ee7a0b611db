import base64

import pytest

from pppchap import mschapv1
from pppchap.errors import LengthError, KeyLengthError

def test_lm_challenge_response():
  challenge = bytes.fromhex("bd332a369b6d33e7")
  response = mschapv1.LmChallengeResponse(challenge, "MyPw")
  assert base64.b64encode(response) == b"lrdNlCKhor03G7XsxVsNlZeh7vMaKe53"

def test_nt_challenge_response():
  # https://tools.ietf.org/html/rfc2433#appendix-B
  challenge = bytes.fromhex("102db5df085d3041")
  response = mschapv1.NtChallengeResponse(challenge, "MyPw")
  assert base64.b64encode(response) == b"Tp08j5z9OF1b9NMkZ5GVbKTDUatAmj1h"
  assert response == bytes.fromhex("4e9d3c8f9cfd385d5bf4d3246791956ca4c351ab409a3d61")

def test_nt_password_hash():
  assert mschapv1.NtPasswordHash("MyPw") == bytes.fromhex("fc156af7edcd6c0edde3337d427f4eac")
  assert mschapv1.NtPasswordHash("MyPw".encode("utf-16le")) == mschapv1.NtPasswordHash("MyPw")
  assert len(mschapv1.NtPasswordHash("")) == 16

def test_hash_nt_password_hash():
  # https://tools.ietf.org/html/rfc2759#section-9.2
  assert mschapv1.HashNtPasswordHash(mschapv1.NtPasswordHash("clientPass")) == bytes.fromhex("41c00c584bd2d91c4017a2a12fa59f3f")

def test_lm_password_hash_is_case_insensitive_and_truncated():
  assert mschapv1.LmPasswordHash("mypw") == mschapv1.LmPasswordHash("MYPW")
  assert mschapv1.LmPasswordHash("A" * 14) == mschapv1.LmPasswordHash("A" * 20)
  assert mschapv1.LmPasswordHash("MyPw")[8:] == bytes.fromhex("aad3b435b51404ee")

def test_challenge_response_length():
  response = mschapv1.ChallengeResponse(b"\x11" * 8, b"\x22" * 16)
  assert len(response) == 24
  assert response == mschapv1.ChallengeResponse(b"\x11" * 8, b"\x22" * 16)

def test_challenge_response_validates_lengths():
  with pytest.raises(LengthError):
    mschapv1.ChallengeResponse(b"\x11" * 7, b"\x22" * 16)
  with pytest.raises(LengthError):
    mschapv1.ChallengeResponse(b"\x11" * 8, b"\x22" * 15)

def test_get_key_40bit():
  key = mschapv1.GetKey_40bit("MyPw")
  assert len(key) == 8
  assert key[:3] == b"\xd1\x26\x9e"
  initial = mschapv1.LmPasswordHash("MyPw")[:8]
  assert key[3:] == mschapv1.GetKey(initial, initial, 8)[3:]

def test_get_key_56bit():
  key = mschapv1.GetKey_56bit("MyPw")
  assert len(key) == 8
  assert key[:1] == b"\xd1"
  assert key[3:] == mschapv1.GetKey_40bit("MyPw")[3:]

def test_get_key_rekey_uses_current_key():
  first = mschapv1.GetKey_40bit("MyPw")
  assert mschapv1.GetKey_40bit("MyPw", first) != first
  with pytest.raises(LengthError):
    mschapv1.GetKey_56bit("MyPw", b"\x00" * 7)

def test_get_key_128bit():
  challenge = bytes.fromhex("102db5df085d3041")
  hashhash = mschapv1.HashNtPasswordHash(mschapv1.NtPasswordHash("MyPw"))
  start = mschapv1.GetStartKey(challenge, hashhash)
  key = mschapv1.GetKey_128bit(challenge, "MyPw")
  assert len(key) == 16
  assert key == mschapv1.GetKey(start, start, 16)
  assert mschapv1.GetKey_128bit(challenge, "MyPw", key) == mschapv1.GetKey(start, key, 16)

def test_reduce_session_key():
  key = bytes(range(8))
  assert mschapv1.ReduceSessionKey(key, 128) == key
  with pytest.raises(KeyLengthError):
    mschapv1.ReduceSessionKey(key, 64)

def test_lm_password_hash_non_latin1_password():
  # Characters latin-1 cannot hold are hashed as '?'
  assert mschapv1.LmPasswordHash("пароль") == mschapv1.LmPasswordHash("??????")
  assert len(mschapv1.LmChallengeResponse(b"\x11" * 8, "пароль")) == 24
  assert mschapv1.GetKey_40bit("пароль")[:3] == b"\xd1\x26\x9e"
