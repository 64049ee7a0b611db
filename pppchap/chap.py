# CHAP with MD5
#   https://tools.ietf.org/html/rfc1994#section-2
#   https://tools.ietf.org/html/rfc2865#section-7.2

import hashlib

from pppchap.errors import LengthError

def ChallengeResponse(Id, Password, Challenge):
  # MD5(Identifier || Secret || Challenge)
  if isinstance(Id, int):
    Id = bytes([Id])
  if len(Id) < 1:
    raise LengthError("Id", 1, len(Id), Exact=False)
  if isinstance(Password, str):
    Password = Password.encode('utf-8')

  md5 = hashlib.md5()
  md5.update(Id[:1]) # Only the first octet is the CHAP Identifier
  md5.update(Password)
  md5.update(Challenge)

  return md5.digest()
