import random

import pytest

from PHE import BGN, Benaloh, Paillier

# small parameters keep key generation fast; the algebra is the same
PAILLIER_BITS = 64
BENALOH_BITS = 64
BGN_BITS = 32


@pytest.fixture
def rng():
    return random.Random(20240601)


@pytest.fixture(scope="module")
def paillier_keys():
    scheme = Paillier()
    return scheme, scheme.key_generation(PAILLIER_BITS, random.Random(1))


@pytest.fixture(scope="module")
def benaloh_keys():
    scheme = Benaloh()
    return scheme, scheme.key_generation(BENALOH_BITS, random.Random(2))


@pytest.fixture(scope="module")
def bgn_keys():
    scheme = BGN()
    return scheme, scheme.key_generation(BGN_BITS, random.Random(3))
