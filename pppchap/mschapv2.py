# A Generic MSCHAPv2/MPPE implementation
# Taken from:
#   https://tools.ietf.org/html/rfc2759#section-8
#   https://tools.ietf.org/html/rfc3078
#   https://tools.ietf.org/html/rfc3079
# RADIUS server is the Authenticator
# Client is the Station or Peer

import functools
import hashlib
import hmac
import logging
from collections import namedtuple

from pppchap.errors import RequireLength, LengthError
from pppchap.mschapv1 import NtPasswordHash, HashNtPasswordHash, ChallengeResponse, GetKey

log = logging.getLogger(__name__)

# Defined in https://tools.ietf.org/html/rfc2759#section-8.7
Magic1 = b'\x4D\x61\x67\x69\x63\x20\x73\x65\x72\x76\x65\x72\x20\x74\x6F\x20\x63\x6C\x69\x65\x6E\x74\x20\x73\x69\x67\x6E\x69\x6E\x67\x20\x63\x6F\x6E\x73\x74\x61\x6E\x74' #39 bytes
Magic2 = b'\x50\x61\x64\x20\x74\x6F\x20\x6D\x61\x6B\x65\x20\x69\x74\x20\x64\x6F\x20\x6D\x6F\x72\x65\x20\x74\x68\x61\x6E\x20\x6F\x6E\x65\x20\x69\x74\x65\x72\x61\x74\x69\x6F\x6E' #41 bytes

# Taken from https://tools.ietf.org/html/rfc3079#section-3.4
MasterKeyMagic = b'\x54\x68\x69\x73\x20\x69\x73\x20\x74\x68\x65\x20\x4d\x50\x50\x45\x20\x4d\x61\x73\x74\x65\x72\x20\x4b\x65\x79' #27 bytes
ClientSendMagic = b'\x4f\x6e\x20\x74\x68\x65\x20\x63\x6c\x69\x65\x6e\x74\x20\x73\x69\x64\x65\x2c\x20\x74\x68\x69\x73\x20\x69\x73\x20\x74\x68\x65\x20\x73\x65\x6e\x64\x20\x6b\x65\x79\x3b\x20\x6f\x6e\x20\x74\x68\x65\x20\x73\x65\x72\x76\x65\x72\x20\x73\x69\x64\x65\x2c\x20\x69\x74\x20\x69\x73\x20\x74\x68\x65\x20\x72\x65\x63\x65\x69\x76\x65\x20\x6b\x65\x79\x2e' #84 Bytes
ClientReceiveMagic = b'\x4f\x6e\x20\x74\x68\x65\x20\x63\x6c\x69\x65\x6e\x74\x20\x73\x69\x64\x65\x2c\x20\x74\x68\x69\x73\x20\x69\x73\x20\x74\x68\x65\x20\x72\x65\x63\x65\x69\x76\x65\x20\x6b\x65\x79\x3b\x20\x6f\x6e\x20\x74\x68\x65\x20\x73\x65\x72\x76\x65\x72\x20\x73\x69\x64\x65\x2c\x20\x69\x74\x20\x69\x73\x20\x74\x68\x65\x20\x73\x65\x6e\x64\x20\x6b\x65\x79\x2e' #84 Bytes
SHSpad1 = b'\x00' * 40
SHSpad2 = b'\xf2' * 40

SessionKeys = namedtuple('SessionKeys', ['Send', 'Receive'])

# RFC 3078 calls the MS-CHAPv1 GetKey this
GetNewKeyFromSHA = GetKey

def _NoneOnShortInput(func):
  # MS-CHAPv2 reports bad lengths to the caller as None instead of raising
  @functools.wraps(func)
  def wrapper(*args, **kwargs):
    try:
      return func(*args, **kwargs)
    except LengthError as e:
      log.warning("%s: %s", func.__name__, e)
      return None
  return wrapper

def _UserNameBytes(UserName):
  if UserName is None:
    UserName = b""
  if isinstance(UserName, str):
    UserName = UserName.encode('ascii')
  if b'\\' in UserName:
    UserName = UserName.split(b'\\', 1)[1] #Strip DOMAIN\ from front if present
  return bytes(UserName)

@_NoneOnShortInput
def ChallengeHash(PeerChallenge, AuthenticatorChallenge, UserName):
  # Calculate the Challenge both sides(AP + Client) will use
  # This is the challenge part asleap/JtR/hashcat will use to crack
  PeerChallenge = RequireLength("PeerChallenge", PeerChallenge, 16, Exact=False)
  AuthenticatorChallenge = RequireLength("AuthenticatorChallenge", AuthenticatorChallenge, 16, Exact=False)

  # Calculate SHA1 hash of Peer+Authenticator+UserName
  sha1 = hashlib.sha1()
  sha1.update(PeerChallenge)
  sha1.update(AuthenticatorChallenge)
  sha1.update(_UserNameBytes(UserName))
  Challenge = sha1.digest()

  # Return first 8 bytes of challenge
  return Challenge[0:8]

@_NoneOnShortInput
def GenerateNTResponse(AuthenticatorChallenge, PeerChallenge, UserName, Password):
  # Generate the NTResponse the client sends the AP
  # This is the response part asleap/JtR/hashcat crack
  Challenge = ChallengeHash(PeerChallenge, AuthenticatorChallenge, UserName)
  if Challenge is None:
    return None
  PasswordHash = NtPasswordHash(Password)

  return ChallengeResponse(Challenge, PasswordHash)

@_NoneOnShortInput
def GenerateAuthenticatorResponse(Password, NTResponse, PeerChallenge, AuthenticatorChallenge, UserName):
  # Create the response the AP sends to the Client to prove it knows the password too
  NTResponse = RequireLength("NTResponse", NTResponse, 24, Exact=False)
  PeerChallenge = RequireLength("PeerChallenge", PeerChallenge, 16, Exact=False)
  AuthenticatorChallenge = RequireLength("AuthenticatorChallenge", AuthenticatorChallenge, 16, Exact=False)

  PasswordHash = NtPasswordHash(Password or "")
  PasswordHashHash = HashNtPasswordHash(PasswordHash)

  Challenge = ChallengeHash(PeerChallenge, AuthenticatorChallenge, UserName)

  sha1 = hashlib.sha1()
  sha1.update(PasswordHashHash)
  sha1.update(NTResponse)
  sha1.update(Magic1)
  Digest = sha1.digest()

  sha1 = hashlib.sha1()
  sha1.update(Digest)
  sha1.update(Challenge)
  sha1.update(Magic2)
  AuthenticatorResponse = sha1.digest()

  return "S=" + AuthenticatorResponse.hex().upper()

def CheckAuthenticatorResponse(Password, NTResponse, PeerChallenge, AuthenticatorChallenge, UserName, ReceivedResponse):
  # Peer side check of the "S=" string, https://tools.ietf.org/html/rfc2759#section-8.8
  MyResponse = GenerateAuthenticatorResponse(Password, NTResponse, PeerChallenge, AuthenticatorChallenge, UserName)
  if MyResponse is None or ReceivedResponse is None:
    return False
  if isinstance(ReceivedResponse, (bytes, bytearray)):
    ReceivedResponse = bytes(ReceivedResponse).decode('ascii', 'replace')

  return hmac.compare_digest(MyResponse.encode(), ReceivedResponse.upper().encode("utf-8"))

@_NoneOnShortInput
def GetMasterKey(PasswordHashHash, NTResponse):
  # Generate Master Key used to derive PMK part of MPPE not MSCHAP
  # https://tools.ietf.org/html/rfc3079#section-3.4
  PasswordHashHash = RequireLength("PasswordHashHash", PasswordHashHash, 16, Exact=False)
  NTResponse = RequireLength("NTResponse", NTResponse, 24, Exact=False)

  sha1 = hashlib.sha1()
  sha1.update(PasswordHashHash)
  sha1.update(NTResponse)
  sha1.update(MasterKeyMagic)
  MasterKey = sha1.digest()

  return MasterKey[:16]

@_NoneOnShortInput
def GetAsymmetricStartKey(MasterKey, SessionKeyLength, IsSend, IsServer):
  # Generate MS-MPPE-Send/Recv-Key
  # From https://tools.ietf.org/html/rfc3079#section-3.4
  # IsSend & IsServer == True - master send session key
  MasterKey = RequireLength("MasterKey", MasterKey, 16, Exact=False)

  if IsSend == IsServer:
    s = ClientReceiveMagic
  else:
    s = ClientSendMagic

  sha1 = hashlib.sha1()
  sha1.update(MasterKey)
  sha1.update(SHSpad1)
  sha1.update(s)
  sha1.update(SHSpad2)
  SessionKey = sha1.digest()

  return SessionKey[:SessionKeyLength]

@_NoneOnShortInput
def _GetSessionKeys(Password, NTResponse, SessionKeyLength, IsServer):
  PasswordHashHash = HashNtPasswordHash(NtPasswordHash(Password))
  MasterKey = GetMasterKey(PasswordHashHash, NTResponse)
  if MasterKey is None:
    return None

  MasterSendKey = GetAsymmetricStartKey(MasterKey, SessionKeyLength, True, IsServer)
  MasterReceiveKey = GetAsymmetricStartKey(MasterKey, SessionKeyLength, False, IsServer)

  return SessionKeys(MasterSendKey, MasterReceiveKey)

def GetSessionKeys_64bit(Password, NTResponse, IsServer=True):
  # https://tools.ietf.org/html/rfc3079#section-3.1 & 3.2
  return _GetSessionKeys(Password, NTResponse, 8, IsServer)

def GetSessionKeys_128bit(Password, NTResponse, IsServer=True):
  # https://tools.ietf.org/html/rfc3079#section-3.3
  return _GetSessionKeys(Password, NTResponse, 16, IsServer)
