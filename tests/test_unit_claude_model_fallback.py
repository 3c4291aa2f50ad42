from careercrafter.components.integrations.claude.model_fallback import (
    MODEL_FAMILIES,
    candidate_models_for,
    is_model_not_found_error,
)


def test_candidate_models_for_known_haiku_aliases():
    primary, snapshot, legacy = MODEL_FAMILIES["haiku"]

    assert candidate_models_for(primary) == [primary, snapshot, legacy]
    assert candidate_models_for(snapshot) == [snapshot, primary, legacy]


def test_candidate_models_for_unknown_or_empty_model():
    assert candidate_models_for("custom-model") == ["custom-model"]
    assert candidate_models_for("") == MODEL_FAMILIES["haiku"]


def test_is_model_not_found_error_matches_provider_payloads():
    err = Exception("Error code: 404 - {'type':'error','error':{'type':'not_found_error','message':'model: claude-3-5-haiku-latest'}}")
    assert is_model_not_found_error(err) is True
    assert is_model_not_found_error(Exception("timeout while contacting provider")) is False
