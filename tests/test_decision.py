"""
Tests for the skip/do decision and the default hooks built on it.
"""

import io
import subprocess

import pytest

from bashsteps import defaults
from bashsteps.decision import GROUP, STEP, Decision, StepContext, current_context, decide, exit_status
from bashsteps.exits import ScriptFailed, StepSkipped


class TestExitStatus:
    def test_ints_pass_through(self):
        assert exit_status(0) == 0
        assert exit_status(3) == 3

    def test_bool_true_means_success(self):
        assert exit_status(True) == 0
        assert exit_status(False) == 1

    def test_completed_process(self):
        cp = subprocess.CompletedProcess(["x"], returncode=4)
        assert exit_status(cp) == 4

    def test_rejects_other_values(self):
        with pytest.raises(TypeError):
            exit_status("0")
        with pytest.raises(TypeError):
            exit_status(None)


class TestDecide:
    def test_success_status_skips(self):
        out = io.StringIO()
        ctx = StepContext(title="X", stdout=out)
        assert decide(STEP, 0, ctx) is Decision.SKIP
        assert out.getvalue() == "** Skipping step: X\n"
        assert ctx.title == ""

    def test_failure_status_continues(self):
        out = io.StringIO()
        ctx = StepContext(title="X", stdout=out)
        assert decide(STEP, 1, ctx) is Decision.CONTINUE
        assert out.getvalue() == "\n** DOING STEP: X\n"
        assert ctx.title == ""

    def test_group_vocabulary(self):
        out = io.StringIO()
        ctx = StepContext(title="G", stdout=out)
        decide(GROUP, 0, ctx)
        ctx.set_title("G")
        decide(GROUP, 2, ctx)
        assert out.getvalue() == "** Skipping group: G\n\n** DOING GROUP: G\n"

    def test_defaults_to_last_recorded_status(self):
        out = io.StringIO()
        ctx = StepContext(stdout=out)
        ctx.record(1)
        assert decide(STEP, None, ctx) is Decision.CONTINUE

    def test_empty_title_is_not_stored(self):
        ctx = StepContext(title="keep")
        ctx.set_title("")
        ctx.set_title(None)
        assert ctx.title == "keep"


class TestStepHooks:
    def test_skip_step_after_success(self, capsys):
        defaults.starting_step("X")
        with pytest.raises(StepSkipped) as exc:
            defaults.skip_step_if_already_done(0)
        assert exc.value.code == 0
        assert exc.value.title == "X"
        assert "** Skipping step: X" in capsys.readouterr().out
        assert current_context().title == ""

    def test_doing_step_after_failure(self, capsys):
        defaults.starting_step("X")
        assert defaults.skip_step_if_already_done(1) is None
        assert "\n** DOING STEP: X\n" in capsys.readouterr().out

    def test_group_without_title(self, capsys):
        with pytest.raises(SystemExit) as exc:
            defaults.skip_group_if_unnecessary(0)
        assert exc.value.code == 0
        assert capsys.readouterr().out == "** Skipping group: \n"

        defaults.skip_group_if_unnecessary(1)
        assert capsys.readouterr().out == "\n** DOING GROUP: \n"

    def test_title_is_consumed_by_each_decision(self, capsys):
        defaults.starting_group("first")
        defaults.skip_group_if_unnecessary(1)
        defaults.skip_group_if_unnecessary(1)
        out = capsys.readouterr().out
        assert "** DOING GROUP: first\n" in out
        assert out.endswith("** DOING GROUP: \n")

    def test_deprecated_aliases(self):
        assert defaults.starting_dependents is defaults.starting_step
        assert defaults.starting_checks is defaults.starting_step
        assert defaults.skip_rest_if_already_done is defaults.skip_step_if_already_done


class TestFailureHooks:
    def test_reportfailed(self, capsys):
        with pytest.raises(ScriptFailed) as exc:
            defaults.reportfailed("reason")
        assert exc.value.code == 255
        err = capsys.readouterr().err
        assert "Script failed...exiting. (reason)" in err

    def test_reportfailed_joins_args(self, capsys):
        with pytest.raises(SystemExit):
            defaults.reportfailed("copy", "/a", 3)
        assert "Script failed...exiting. (copy /a 3)" in capsys.readouterr().err

    def test_prev_cmd_failed_after_success(self, capsys):
        assert defaults.prev_cmd_failed("nope", status=0) is None
        captured = capsys.readouterr()
        assert captured.out == ""
        assert captured.err == ""

    def test_prev_cmd_failed_after_failure(self, capsys):
        with pytest.raises(ScriptFailed) as exc:
            defaults.prev_cmd_failed("mkdir", "data", status=1)
        assert exc.value.code == 255
        assert "Script failed...exiting. (mkdir data)" in capsys.readouterr().err

    def test_prev_cmd_failed_uses_recorded_status(self):
        current_context().record(7)
        with pytest.raises(ScriptFailed):
            defaults.prev_cmd_failed("last")
