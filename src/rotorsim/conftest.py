import pytest

from rotorsim.config import build_machine, parse_config
from rotorsim.log_config import configure_logging
from rotorsim.machine import Machine

DEFAULT_CONFIG = """\
ABCDEFGHIJKLMNOPQRSTUVWXYZ
5 3
 I MQ      (AELTPHQXRU) (BKNW) (CMOY) (DFG) (IV) (JZ) (S)
 II ME     (FIXVYOMW) (CDKLHUP) (ESZ) (BJ) (GR) (NT) (A) (Q)
 III MV    (ABDHPEJT) (CFLVMZOYQIRWUKXSG) (N)
 IV MJ     (AEPLIYWCOXMRFZBSTGJQNH) (DV) (KU)
 V MZ      (AVOLDRWFIUQ)(BZKSMNHYC) (EGTJPX)
 VI MZM    (AJQDVLEOZWIYTS) (CGMNHFUX) (BPRK)
 VII MZM   (ANOUPFRIMBZTLWKSVEGCJYDHXQ)
 VIII MZM  (AFLSETWUNDHOZVICQ) (BKJ) (GXY) (MPR)
 Beta N    (ALBEVFCYODJWUGNMQTZSKPR) (HIX)
 Gamma N   (AFNIRLBSQWVXGUZDKMTPCOYJHE)
 B R       (AE) (BN) (CK) (DQ) (FU) (GY) (HW) (IJ) (LO) (MP)
           (RX) (SZ) (TV)
 C R       (AR) (BD) (CO) (EJ) (FN) (GT) (HK) (IV) (LM) (PW)
           (QZ) (SX) (UY)
"""


@pytest.fixture(autouse=True)
def quiet_logging():
    configure_logging(verbose=False)


@pytest.fixture
def default_config_text() -> str:
    return DEFAULT_CONFIG


@pytest.fixture
def machine() -> Machine:
    """A fresh machine (and rotor catalog) built from the default configuration."""
    return build_machine(parse_config(DEFAULT_CONFIG))


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "default.conf"
    path.write_text(DEFAULT_CONFIG, encoding="utf-8")
    return path
