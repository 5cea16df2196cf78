# tests/engines/test_registry.py
import pytest

from crflearn.data.dictionary import Dictionary
from crflearn.engines import registry
from crflearn.engines.crfsuite_engine import CRFSuiteTrainEngine
from crflearn.engines.registry import InstanceFactory, register_engine, resolve_train_engine
from crflearn.utils.errors import ResourceCreationError


def test_default_factory_creates_fresh_dictionaries():
    factory = InstanceFactory()
    a = factory.create_dictionary()
    b = factory.create_dictionary()

    assert isinstance(a, Dictionary)
    assert a is not b


def test_default_engine_is_crfsuite():
    engine = InstanceFactory().create_trainer("dyad", "lbfgs")
    try:
        assert isinstance(engine, CRFSuiteTrainEngine)
    finally:
        engine.release()


def test_unknown_engine_name():
    with pytest.raises(ResourceCreationError) as exc:
        resolve_train_engine(name="nope", feature_type="dyad", algorithm="lbfgs")
    assert "crfsuite" in str(exc.value)


def test_register_engine(monkeypatch, make_factory):
    monkeypatch.setattr(registry, "_ENGINE_REGISTRY", dict(registry._ENGINE_REGISTRY))
    fake = make_factory()

    @register_engine("recording")
    def _make(feature_type, algorithm):
        return fake.create_trainer(feature_type, algorithm)

    engine = InstanceFactory(engine="recording").create_trainer("crf1d", "ap")

    assert engine is fake.trainer
    assert (engine.feature_type, engine.algorithm) == ("crf1d", "ap")
