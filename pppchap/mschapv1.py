# MS-CHAPv1 and the MPPE keys derived from it
#   https://tools.ietf.org/html/rfc2433#appendix-A
#   https://tools.ietf.org/html/rfc3078#section-7.3
#   https://tools.ietf.org/html/rfc3079#section-2

import hashlib
from Crypto.Hash import MD4

from pppchap.des import DesEncrypt
from pppchap.errors import RequireLength, KeyLengthError

# Defined in https://tools.ietf.org/html/rfc2433#appendix-A.3
StdText = b'\x4B\x47\x53\x21\x40\x23\x24\x25' # "KGS!@#$%"

# https://tools.ietf.org/html/rfc3078#section-7.3
SHApad1 = b'\x00' * 40
SHApad2 = b'\xf2' * 40

# https://tools.ietf.org/html/rfc3079#section-2.1 & 2.2
Salt40 = b'\xd1\x26\x9e'
Salt56 = b'\xd1'

def LmPasswordHash(Password, Encoding='latin-1'):
  # The LM hash only looks at the first 14 upper-cased characters, shorter
  # passwords are zero padded. Peers do the same so keep it lossy.
  if isinstance(Password, str):
    Password = Password.upper().encode(Encoding, 'replace') # unmappable characters become '?'
  else:
    Password = bytes(Password).upper()
  UcasePassword = Password[:14].ljust(14, b'\x00')

  PasswordHash = DesEncrypt(StdText, UcasePassword[0:7])
  PasswordHash += DesEncrypt(StdText, UcasePassword[7:14])

  return PasswordHash

def NtPasswordHash(Password):
  # MD4 the password with right encoding, bytes are taken as UTF-16LE already
  if isinstance(Password, str):
    Password = Password.encode('utf-16le')

  md4 = MD4.new()
  md4.update(Password)
  PasswordHash = md4.digest()

  return PasswordHash

def HashNtPasswordHash(PasswordHash):
  # Generate the double hash'ed Hash
  PasswordHash = RequireLength("PasswordHash", PasswordHash, 16)

  md4 = MD4.new()
  md4.update(PasswordHash)
  PasswordHashHash = md4.digest()

  return PasswordHashHash

def ChallengeResponse(Challenge, PasswordHash):
  # Three DES encryptions of the challenge, keyed by the zero padded hash
  Challenge = RequireLength("Challenge", Challenge, 8)
  PasswordHash = RequireLength("PasswordHash", PasswordHash, 16)

  ZPasswordHash = PasswordHash + b'\x00' * 5

  Response = DesEncrypt(Challenge, ZPasswordHash[0:7])
  Response += DesEncrypt(Challenge, ZPasswordHash[7:14])
  Response += DesEncrypt(Challenge, ZPasswordHash[14:21])

  return Response

def LmChallengeResponse(Challenge, Password, Encoding='latin-1'):
  return ChallengeResponse(Challenge, LmPasswordHash(Password, Encoding))

def NtChallengeResponse(Challenge, Password):
  return ChallengeResponse(Challenge, NtPasswordHash(Password))

def GetStartKey(Challenge, NtPasswordHashHash):
  # Initial 128-bit key, https://tools.ietf.org/html/rfc3079#section-2.4
  Challenge = RequireLength("Challenge", Challenge, 8)
  NtPasswordHashHash = RequireLength("NtPasswordHashHash", NtPasswordHashHash, 16)

  sha1 = hashlib.sha1()
  sha1.update(NtPasswordHashHash)
  sha1.update(NtPasswordHashHash)
  sha1.update(Challenge)
  InitialSessionKey = sha1.digest()

  return InitialSessionKey[:16]

def GetKey(InitialSessionKey, CurrentSessionKey, LengthOfDesiredKey):
  # GetNewKeyFromSHA, https://tools.ietf.org/html/rfc3078#section-7.3
  InitialSessionKey = RequireLength("InitialSessionKey", InitialSessionKey, LengthOfDesiredKey, Exact=False)
  CurrentSessionKey = RequireLength("CurrentSessionKey", CurrentSessionKey, LengthOfDesiredKey, Exact=False)

  sha1 = hashlib.sha1()
  sha1.update(InitialSessionKey)
  sha1.update(SHApad1)
  sha1.update(CurrentSessionKey)
  sha1.update(SHApad2)
  InterimKey = sha1.digest()

  return InterimKey[:LengthOfDesiredKey]

def ReduceSessionKey(SessionKey, KeyLength):
  # Reduce key size appropriately
  # https://tools.ietf.org/html/rfc3079#section-3.1 3.2 & 3.3
  if KeyLength == 40:
    return Salt40 + SessionKey[3:]
  if KeyLength == 56:
    return Salt56 + SessionKey[1:]
  if KeyLength == 128:
    return bytes(SessionKey)
  raise KeyLengthError(KeyLength)

def _GetLmKey(Password, CurrentSessionKey, KeyLength):
  # 40 and 56 bit keys start from the first 8 octets of the LM hash
  InitialSessionKey = LmPasswordHash(Password)[:8]
  if CurrentSessionKey is None:
    CurrentSessionKey = InitialSessionKey
  CurrentSessionKey = RequireLength("CurrentSessionKey", CurrentSessionKey, 8)

  SessionKey = GetKey(InitialSessionKey, CurrentSessionKey, 8)
  return ReduceSessionKey(SessionKey, KeyLength)

def GetKey_40bit(Password, CurrentSessionKey=None):
  # https://tools.ietf.org/html/rfc3079#section-2.1
  return _GetLmKey(Password, CurrentSessionKey, 40)

def GetKey_56bit(Password, CurrentSessionKey=None):
  # https://tools.ietf.org/html/rfc3079#section-2.2
  return _GetLmKey(Password, CurrentSessionKey, 56)

def GetKey_128bit(Challenge, Password, CurrentSessionKey=None):
  # https://tools.ietf.org/html/rfc3079#section-2.3
  PasswordHashHash = HashNtPasswordHash(NtPasswordHash(Password))
  InitialSessionKey = GetStartKey(Challenge, PasswordHashHash)
  if CurrentSessionKey is None:
    CurrentSessionKey = InitialSessionKey
  CurrentSessionKey = RequireLength("CurrentSessionKey", CurrentSessionKey, 16)

  return GetKey(InitialSessionKey, CurrentSessionKey, 16)
