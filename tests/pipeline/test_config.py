import pytest

from converthub.config import ConversionConfig


def test_defaults():
    config = ConversionConfig()

    assert config.line_y_tolerance == 3.0
    assert config.paragraph_gap_factor == 1.4
    assert config.heading_size_factor == 1.25
    assert config.min_space_factor == 0.25
    assert config.detect_alignment is False
    assert config.password is None


def test_from_env_parses_field_types():
    env = {
        "CONVERTHUB_LINE_Y_TOLERANCE": "2.5",
        "CONVERTHUB_LIST_INDENT_TWIPS": "360",
        "CONVERTHUB_DETECT_ALIGNMENT": "yes",
        "CONVERTHUB_DEFAULT_FONT_FAMILY": "Georgia",
        "CONVERTHUB_PASSWORD": "s3cret",
        "UNRELATED": "ignored",
    }
    config = ConversionConfig.from_env(env=env)

    assert config.line_y_tolerance == 2.5
    assert config.list_indent_twips == 360
    assert config.detect_alignment is True
    assert config.default_font_family == "Georgia"
    assert config.password == "s3cret"
    assert config.paragraph_gap_factor == 1.4


def test_overrides_win_over_env():
    env = {"CONVERTHUB_DETECT_ALIGNMENT": "off"}
    config = ConversionConfig.from_env(env=env, detect_alignment=True)
    assert config.detect_alignment is True


def test_from_env_reads_dotenv_file(tmp_path, monkeypatch):
    monkeypatch.delenv("CONVERTHUB_BODY_SPACE_AFTER_TWIPS", raising=False)
    env_file = tmp_path / ".env"
    env_file.write_text("CONVERTHUB_BODY_SPACE_AFTER_TWIPS=180\n")

    config = ConversionConfig.from_env(dotenv_path=str(env_file))
    assert config.body_space_after_twips == 180


@pytest.mark.parametrize("key,value,message", [
    ("CONVERTHUB_DETECT_ALIGNMENT", "maybe", "Invalid boolean"),
    ("CONVERTHUB_PAGE_MARGIN_TWIPS", "1in", "Invalid integer"),
    ("CONVERTHUB_PARAGRAPH_GAP_FACTOR", "wide", "Invalid number"),
])
def test_from_env_rejects_bad_values(key, value, message):
    with pytest.raises(ValueError, match=message):
        ConversionConfig.from_env(env={key: value})


def test_validation():
    with pytest.raises(ValueError):
        ConversionConfig(line_y_tolerance=-1)
    with pytest.raises(ValueError):
        ConversionConfig(heading_level2_factor=2.0)
