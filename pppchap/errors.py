# Errors raised while deriving responses and keys

class PPPChapError(Exception):
  pass

class LengthError(PPPChapError, ValueError):
  # A fixed length argument is shorter (or, where exact, longer) than the RFC allows

  def __init__(self, Name, Expected, Actual, Exact=True):
    self.Name = Name
    self.Expected = Expected
    self.Actual = Actual
    if Exact:
      Wanted = "%d" % Expected
    else:
      Wanted = "at least %d" % Expected
    super().__init__("%s must be %s bytes, got %d" % (Name, Wanted, Actual))

class KeyLengthError(PPPChapError, ValueError):
  # MPPE only knows 40, 56 and 128 bit keys

  def __init__(self, KeyLength):
    self.KeyLength = KeyLength
    super().__init__("unsupported MPPE key length: %r bits" % (KeyLength,))

def RequireLength(Name, Value, Length, Exact=True):
  # Returns Value cut to Length, raising LengthError if it is too short
  # (or too long when Exact)
  Actual = len(Value)
  if Actual < Length or (Exact and Actual != Length):
    raise LengthError(Name, Length, Actual, Exact)
  return bytes(Value[:Length])
