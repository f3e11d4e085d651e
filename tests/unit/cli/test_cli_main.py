"""Tests for the awsprovider command line interface."""

import json

import pytest

from awsprovider.cli.main import format_output, main, parse_args
from awsprovider.providers.aws.sweep import get_sweeper_registry

AWS_SWEEPERS = [
    "aws_cloudformation_stack_set_instance",
    "aws_eks_fargate_profile",
    "aws_placement_group",
    "aws_sqs_queue",
]


@pytest.mark.unit
@pytest.mark.usefixtures("restore_logging")
class TestMain:
    """Test command dispatch and exit codes."""

    def setup_method(self):
        self.swept = []

    def add_sweeper(self, name, error=None):
        def run(region):
            self.swept.append((name, region))
            if error is not None:
                raise error
        get_sweeper_registry().add_sweeper(name, run)

    def test_no_command(self, capsys):
        assert main([]) == 1
        assert "No command specified" in capsys.readouterr().out

    def test_list_sweepers_json(self, capsys):
        assert main(["--log-level", "ERROR", "--format", "json", "list-sweepers"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert [s["name"] for s in output["sweepers"]] == AWS_SWEEPERS
        assert all(s["dependencies"] == [] for s in output["sweepers"])

    def test_sweep_without_region(self, monkeypatch, capsys):
        monkeypatch.delenv("SWEEP", raising=False)

        assert main(["--log-level", "ERROR", "sweep"]) == 1
        assert "no region to sweep" in capsys.readouterr().out

    def test_sweep_regions(self, capsys):
        self.add_sweeper("fake_ok")

        code = main(["--log-level", "ERROR", "--format", "json",
                     "sweep", "--region", "us-east-1, us-west-2", "--sweepers", "fake_ok"])

        assert code == 0
        assert self.swept == [("fake_ok", "us-east-1"), ("fake_ok", "us-west-2")]
        output = json.loads(capsys.readouterr().out)
        assert output["regions"]["us-west-2"] == {"status": "succeeded", "errors": []}

    def test_sweep_regions_from_environment(self, monkeypatch):
        monkeypatch.setenv("SWEEP", "eu-west-1")
        self.add_sweeper("fake_ok")

        assert main(["--log-level", "ERROR", "sweep", "--sweepers", "fake_ok"]) == 0
        assert self.swept == [("fake_ok", "eu-west-1")]

    def test_failed_sweeper(self, capsys):
        self.add_sweeper("fake_broken", RuntimeError("DependencyViolation"))
        self.add_sweeper("fake_ok")

        code = main(["--log-level", "ERROR", "sweep", "--region", "us-east-1",
                     "--sweepers", "fake_broken,fake_ok"])

        assert code == 1
        assert ("fake_ok", "us-east-1") in self.swept
        out = capsys.readouterr().out
        assert "us-east-1: failed" in out
        assert "DependencyViolation" in out

    def test_unknown_sweeper(self, capsys):
        assert main(["--log-level", "ERROR", "sweep", "--region", "us-east-1", "--sweepers", "nope"]) == 1
        assert "Unknown sweeper: nope" in capsys.readouterr().out


@pytest.mark.unit
class TestFormatOutput:
    """Test text and JSON rendering."""

    def test_text_sweepers(self):
        result = {"sweepers": [
            {"name": "aws_eks_fargate_profile", "dependencies": []},
            {"name": "aws_eks_cluster", "dependencies": ["aws_eks_fargate_profile"]},
        ]}

        assert format_output(result, "text") == (
            "aws_eks_fargate_profile\naws_eks_cluster (after aws_eks_fargate_profile)"
        )

    def test_text_regions(self):
        result = {"regions": {
            "us-east-1": {"status": "succeeded", "errors": []},
            "us-west-2": {"status": "failed", "errors": ["boom"]},
        }}

        assert format_output(result, "text") == "us-east-1: succeeded\nus-west-2: failed\n  * boom"

    def test_json(self):
        assert json.loads(format_output({"regions": {}}, "json")) == {"regions": {}}

    def test_parse_args(self):
        args = parse_args(["--format", "json", "sweep", "--region", "us-east-1"])

        assert args.command == "sweep"
        assert args.region == "us-east-1"
        assert args.sweepers is None
