import pytest

from PHE import DEFAULT_CONFIG, SchemeConfig
from PHE.config import BENALOH_R, BGN_T, CERTAINTY


def test_defaults():
    assert DEFAULT_CONFIG.benaloh_r == BENALOH_R == 199
    assert DEFAULT_CONFIG.bgn_t == BGN_T == 100
    assert DEFAULT_CONFIG.certainty == CERTAINTY == 64
    assert DEFAULT_CONFIG.validate() is DEFAULT_CONFIG


def test_round_trips_through_dict():
    config = SchemeConfig(bgn_t=250, benaloh_r=11)
    assert SchemeConfig.from_dict(config.to_dict()) == config


@pytest.mark.parametrize("bad", [
    {"benaloh_r": 200},
    {"bgn_t": 0},
    {"certainty": 0},
    {"security_bits": 4},
    {"max_keygen_attempts": 0},
    {"fixed_point_deg": 0},
])
def test_rejects_bad_values(bad):
    with pytest.raises(ValueError):
        SchemeConfig.from_dict(bad)


def test_rejects_unknown_keys():
    with pytest.raises(ValueError):
        SchemeConfig.from_dict({"prime_min_val": 50})


def test_is_immutable():
    with pytest.raises(AttributeError):
        DEFAULT_CONFIG.bgn_t = 5
