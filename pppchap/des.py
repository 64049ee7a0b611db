# DES helpers shared by MS-CHAPv1 and MS-CHAPv2
#   https://tools.ietf.org/html/rfc2433#appendix-A

from Crypto.Cipher import DES

from pppchap.errors import RequireLength

def ExpandDesKey(Key):
  # Spread a 7-byte secret over 8 bytes, 7 bits each, leaving bit 0 for parity.
  # NOTE: bit 0 is always set to 1. This is not DES odd parity, but it is what
  # peers compute and DES ignores those bits anyway.
  Key = RequireLength("Key", Key, 7)

  ParityKey = bytearray(8)
  Next = 0
  for i in range(7):
    Working = Key[i]
    ParityKey[i] = ((Working >> i) | Next | 1) & 0xFF
    Next = (Working << (7 - i)) & 0xFF
  ParityKey[7] = Next | 1

  return bytes(ParityKey)

def DesEncrypt(Clear, Key):
  # One DES block, ECB, no padding, keyed by a 7-byte secret
  Clear = RequireLength("Clear", Clear, 8)

  des = DES.new(ExpandDesKey(Key), DES.MODE_ECB)
  return des.encrypt(Clear)
