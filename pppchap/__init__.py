# CHAP, MS-CHAPv1 and MS-CHAPv2 challenge-response and MPPE key derivation
#   https://tools.ietf.org/html/rfc1994
#   https://tools.ietf.org/html/rfc2433
#   https://tools.ietf.org/html/rfc2759
#   https://tools.ietf.org/html/rfc3079

from pppchap import chap, mschapv1, mschapv2, eap
from pppchap.errors import PPPChapError, LengthError, KeyLengthError

__version__ = "1.0.0"

__all__ = [
  "chap",
  "mschapv1",
  "mschapv2",
  "eap",
  "PPPChapError",
  "LengthError",
  "KeyLengthError",
]
