# EAP-MSCHAPv2 key material for one authentication
# Used to help understand how PEAP works
# RADIUS server is the Authenticator
# Client is the Station or Peer

import logging
from collections import namedtuple

from pppchap import mschapv1, mschapv2
from pppchap.errors import KeyLengthError, LengthError

log = logging.getLogger(__name__)

# MPPE strength in bits -> octets of start key to derive
KeyOctets = {40: 8, 56: 8, 128: 16}

Result = namedtuple('Result', [
  'Challenge',
  'NTResponse',
  'AuthenticatorResponse',
  'PasswordHash',
  'PasswordHashHash',
  'MasterKey',
  'MasterSendKey',
  'MasterReceiveKey',
  'SendSessionKey',
  'ReceiveSessionKey',
  'MSK',
])

class MSCHAPV2:
  # Everything the RADIUS server derives after a successful MS-CHAPv2 exchange

  def __init__(self, UserName, Password, AuthenticatorChallenge, PeerChallenge, KeyLength=128):
    if KeyLength not in KeyOctets:
      raise KeyLengthError(KeyLength)
    self.UserName = UserName
    self.Password = Password
    self.AuthenticatorChallenge = AuthenticatorChallenge
    self.PeerChallenge = PeerChallenge
    self.KeyLength = KeyLength

  def Run(self):
    length = KeyOctets[self.KeyLength]

    Challenge = mschapv2.ChallengeHash(self.PeerChallenge, self.AuthenticatorChallenge, self.UserName)
    if Challenge is None:
      raise LengthError("PeerChallenge/AuthenticatorChallenge", 16,
                        min(len(self.PeerChallenge), len(self.AuthenticatorChallenge)), Exact=False)
    PasswordHash = mschapv1.NtPasswordHash(self.Password)
    PasswordHashHash = mschapv1.HashNtPasswordHash(PasswordHash)
    NTResponse = mschapv1.ChallengeResponse(Challenge, PasswordHash)
    AuthenticatorResponse = mschapv2.GenerateAuthenticatorResponse(self.Password, NTResponse, self.PeerChallenge, self.AuthenticatorChallenge, self.UserName)
    MasterKey = mschapv2.GetMasterKey(PasswordHashHash, NTResponse)

    MasterSendKey = mschapv2.GetAsymmetricStartKey(MasterKey, length, True, True)
    MasterReceiveKey = mschapv2.GetAsymmetricStartKey(MasterKey, length, False, True)
    SendSessionKey = mschapv2.GetNewKeyFromSHA(MasterSendKey, MasterSendKey, length)
    ReceiveSessionKey = mschapv2.GetNewKeyFromSHA(MasterReceiveKey, MasterReceiveKey, length)
    SendSessionKey = mschapv1.ReduceSessionKey(SendSessionKey, self.KeyLength)
    ReceiveSessionKey = mschapv1.ReduceSessionKey(ReceiveSessionKey, self.KeyLength)
    MSK = MasterReceiveKey + MasterSendKey

    log.debug('AuthenticatorChallenge: %s', self.AuthenticatorChallenge.hex())
    log.debug('PeerChallenge: %s', self.PeerChallenge.hex())
    log.debug('Challenge: %s', Challenge.hex())
    log.debug('NTResponse: %s', NTResponse.hex())
    log.debug('AuthenticatorResponse: %s', AuthenticatorResponse)
    log.debug('PasswordHashHash: %s', PasswordHashHash.hex())
    log.debug('MasterKey: %s', MasterKey.hex())
    log.debug('MasterSendKey: %s', MasterSendKey.hex())
    log.debug('MasterReceiveKey: %s', MasterReceiveKey.hex())
    log.debug('EAP-MSCHAPV2: Derived key: %s', MSK.hex())
    log.debug('SendSessionKey: %s', SendSessionKey.hex())
    log.debug('ReceiveSessionKey: %s', ReceiveSessionKey.hex())

    return Result(Challenge, NTResponse, AuthenticatorResponse, PasswordHash, PasswordHashHash,
                  MasterKey, MasterSendKey, MasterReceiveKey, SendSessionKey, ReceiveSessionKey, MSK)
