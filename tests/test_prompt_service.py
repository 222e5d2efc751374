from pathlib import Path

import pytest

from feedbacksense.services.prompt_service import PromptService


def test_prompt_service_loads_shipped_templates(prompts_dir: Path) -> None:
    service = PromptService(base_path=prompts_dir)

    assert {"classify_feedback", "synthesize_report"} <= set(service.registry)
    rendered = service.render("classify_feedback", feedback="App crashes on upload")
    assert 'Feedback: "App crashes on upload"' in rendered
    assert "$feedback" not in rendered


def test_prompt_service_renders_from_env_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    prompts = tmp_path / "prompts"
    prompts.mkdir()
    (prompts / "sample.md").write_text("Data: $data costs $$5\n", encoding="utf-8")
    (prompts / "registry.yaml").write_text("sample: sample.md\n", encoding="utf-8")
    monkeypatch.setenv("FEEDBACKSENSE_PROMPTS_PATH", str(prompts))

    service = PromptService()

    assert service.render("sample", data=[1, 2]) == "Data: [1, 2] costs $5"


def test_prompt_service_missing_placeholder(tmp_path: Path) -> None:
    prompts = tmp_path / "prompts"
    prompts.mkdir()
    (prompts / "sample.md").write_text("Hello $name", encoding="utf-8")
    (prompts / "registry.yaml").write_text("sample: sample.md\n", encoding="utf-8")

    service = PromptService(base_path=prompts)

    with pytest.raises(KeyError):
        service.render("sample")
    with pytest.raises(KeyError):
        service.get_prompt("unknown")


def test_prompt_service_rejects_non_mapping_registry(tmp_path: Path) -> None:
    prompts = tmp_path / "prompts"
    prompts.mkdir()
    (prompts / "registry.yaml").write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError):
        PromptService(base_path=prompts)


def test_prompt_service_requires_registry(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        PromptService(base_path=tmp_path)
