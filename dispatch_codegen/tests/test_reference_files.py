import json
from pathlib import Path

import pytest

from dispatch_codegen.pipeline import AttributeExpander, DispatchConfig


def discover_test_cases():
    """Automatically discover all test cases from test_cases directory"""
    test_cases_dir = Path(__file__).parent / "test_data" / "test_cases"
    test_cases = []

    for test_dir in sorted(test_cases_dir.iterdir()):
        if not test_dir.is_dir() or test_dir.name.startswith("."):
            continue

        input_file = test_dir / "input.rs"
        reference_file = test_dir / "reference.rs"
        if not input_file.exists() or not reference_file.exists():
            continue

        test_cases.append(
            {
                "test_name": test_dir.name,
                "input_file": input_file,
                "reference_file": reference_file,
                "config_file": test_dir / "config.json",
            }
        )

    return test_cases


@pytest.mark.parametrize("test_case", discover_test_cases(), ids=lambda tc: tc["test_name"])
def test_reference_file_expansion(test_case):
    """Test attribute expansion against reference files"""
    if test_case["config_file"].exists():
        with open(test_case["config_file"]) as f:
            config = DispatchConfig.from_dict(json.load(f))
    else:
        config = DispatchConfig()

    expander = AttributeExpander(config)
    generated = expander.expand_file(test_case["input_file"])

    with open(test_case["reference_file"], encoding="utf-8") as f:
        reference = f.read()

    assert generated == reference, f"Expanded code for {test_case['test_name']} doesn't match reference"


@pytest.mark.parametrize("test_case", discover_test_cases(), ids=lambda tc: tc["test_name"])
def test_reference_files_are_stable(test_case):
    """Expanding a reference file again leaves it unchanged"""
    reference = test_case["reference_file"].read_text(encoding="utf-8")
    assert AttributeExpander().expand_source(reference) == reference


if __name__ == "__main__":
    pytest.main([__file__])
