import numpy as np
import pytest

from gwas_power import InvalidParameter, power_beta_het, power_beta_maf, power_n_qsq
from gwas_power.validation import as_scalar, as_vector

BETA = [0.1, 0.2]
FREQ = [0.1, 0.3]


@pytest.mark.parametrize(
    "kwargs, parameter, message",
    [
        ({"qsq": [0.1]}, "n", "Parameter n not found"),
        ({"n": [1000]}, "qsq", "Parameter qsq not found"),
        ({"n": 1000, "qsq": [0.1]}, "n", "Parameter n not a numeric vector"),
        ({"n": [1000], "qsq": 0.1}, "qsq", "Parameter qsq not a numeric vector"),
        ({"n": [], "qsq": [0.1]}, "n", "Parameter n not a numeric vector"),
        ({"n": [[1000, 2000]], "qsq": [0.1]}, "n", "Parameter n not a numeric vector"),
        ({"n": ["1000"], "qsq": [0.1]}, "n", "Parameter n not a numeric vector"),
        ({"n": [1000], "qsq": [True, False]}, "qsq", "Parameter qsq not a numeric vector"),
        ({"n": [1000], "qsq": [0.1], "pval": [5e-8, 1e-5]}, "pval", "Parameter pval not a numeric scalar"),
        ({"n": [1000], "qsq": [0.1], "pval": "5e-8"}, "pval", "Parameter pval not a numeric scalar"),
        ({"n": [-1, 1000], "qsq": [0.1]}, "n", "Parameter n has unacceptable values"),
        ({"n": [np.inf], "qsq": [0.1]}, "n", "Parameter n has unacceptable values"),
        ({"n": [1000], "qsq": [-0.01]}, "qsq", "Parameter qsq has unacceptable values"),
        ({"n": [1000], "qsq": [1.01]}, "qsq", "Parameter qsq has unacceptable values"),
        ({"n": [1000], "qsq": [np.nan]}, "qsq", "Parameter qsq has unacceptable values"),
        ({"n": [1000], "qsq": [0.1], "pval": 0}, "pval", "Parameter pval has unacceptable value"),
        ({"n": [1000], "qsq": [0.1], "pval": 1}, "pval", "Parameter pval has unacceptable value"),
        ({"n": [1000], "qsq": [0.1], "pval": np.nan}, "pval", "Parameter pval has unacceptable value"),
    ],
)
def test_power_n_qsq_rejects(kwargs, parameter, message):
    with pytest.raises(InvalidParameter, match=message) as excinfo:
        power_n_qsq(**kwargs)
    assert excinfo.value.parameter == parameter


@pytest.mark.parametrize(
    "kwargs, parameter, message",
    [
        ({"het": FREQ, "n": 5000}, "beta", "Parameter beta not found"),
        ({"beta": BETA, "n": 5000}, "het", "Parameter het not found"),
        ({"beta": BETA, "het": FREQ}, "n", "Parameter n not found"),
        ({"beta": BETA, "het": FREQ, "n": [5000, 6000]}, "n", "Parameter n not a numeric scalar"),
        ({"beta": BETA, "het": FREQ, "n": True}, "n", "Parameter n not a numeric scalar"),
        ({"beta": [np.inf], "het": FREQ, "n": 5000}, "beta", "Parameter beta has unacceptable values"),
        ({"beta": BETA, "het": [1.5], "n": 5000}, "het", "Parameter het has unacceptable values"),
        ({"beta": BETA, "het": FREQ, "n": -5}, "n", "Parameter n has unacceptable value"),
        ({"beta": BETA, "het": FREQ, "n": np.nan}, "n", "Parameter n has unacceptable value"),
        ({"beta": BETA, "het": FREQ, "n": 5000, "pval": 1.0}, "pval", "Parameter pval has unacceptable value"),
    ],
)
def test_power_beta_het_rejects(kwargs, parameter, message):
    with pytest.raises(InvalidParameter, match=message) as excinfo:
        power_beta_het(**kwargs)
    assert excinfo.value.parameter == parameter


@pytest.mark.parametrize(
    "kwargs, parameter, message",
    [
        ({"maf": FREQ, "n": 5000}, "beta", "Parameter beta not found"),
        ({"beta": BETA, "n": 5000}, "maf", "Parameter maf not found"),
        ({"beta": BETA, "maf": FREQ}, "n", "Parameter n not found"),
        ({"beta": BETA, "maf": [0.6], "n": 5000}, "maf", "Parameter maf has unacceptable values"),
        ({"beta": BETA, "maf": [-0.1], "n": 5000}, "maf", "Parameter maf has unacceptable values"),
        ({"beta": [np.nan], "maf": FREQ, "n": 5000}, "beta", "Parameter beta has unacceptable values"),
        ({"beta": BETA, "maf": FREQ, "n": -1}, "n", "Parameter n has unacceptable value"),
        ({"beta": BETA, "maf": FREQ, "n": 5000, "pval": 0.0}, "pval", "Parameter pval has unacceptable value"),
    ],
)
def test_power_beta_maf_rejects(kwargs, parameter, message):
    with pytest.raises(InvalidParameter, match=message) as excinfo:
        power_beta_maf(**kwargs)
    assert excinfo.value.parameter == parameter


def test_invalid_parameter_is_value_error():
    with pytest.raises(ValueError):
        power_n_qsq(n=[-1], qsq=[0.1])


def test_validation_runs_before_any_grid_is_built():
    # a valid n followed by an invalid maf still fails as a whole
    with pytest.raises(InvalidParameter, match="maf"):
        power_beta_maf(beta=BETA, maf=[0.1, 0.6], n=5000)


def test_accepted_input_forms():
    grid = power_beta_maf(beta=np.array([0.1, 0.2]), maf=(0.1, 0.5), n=[5000], pval=np.float64(1e-5))
    assert grid.shape == (2, 2)
    grid = power_n_qsq(n=np.arange(0, 3000, 1000), qsq=[0, 1], pval=1e-5)
    assert grid.shape == (3, 2)


def test_integers_beyond_int64_are_numeric():
    grid = power_n_qsq(n=[2**70, 1000], qsq=[0.1])
    assert grid.shape == (2, 1)
    assert grid.rows[0] == float(2**70)
    assert grid.cell(0, 0) == pytest.approx(1.0)


def test_object_vectors_with_non_numbers_are_rejected():
    with pytest.raises(InvalidParameter, match="Parameter qsq not a numeric vector"):
        power_n_qsq(n=[1000], qsq=[0.1, object()])


def test_boundaries_are_accepted():
    power_n_qsq(n=[0], qsq=[0.0, 1.0])
    power_beta_het(beta=[-10.0, 0.0, 10.0], het=[0.0, 1.0], n=0)
    power_beta_maf(beta=[0.1], maf=[0.0, 0.5], n=0)


def test_as_vector_returns_array():
    arr = as_vector([1, 2, 3], "x")
    assert isinstance(arr, np.ndarray)
    assert arr.tolist() == [1, 2, 3]


def test_as_scalar_forms():
    assert as_scalar(5000, "n") == 5000.0
    assert as_scalar([5000], "n") == 5000.0
    assert as_scalar(np.array(0.5), "n") == 0.5
    with pytest.raises(InvalidParameter, match="Parameter n not a numeric scalar"):
        as_scalar([[1, 2]], "n")
