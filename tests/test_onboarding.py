"""
End-to-end scenarios for the onboarding controller against a fake shell.
"""

import json

from autopilot_onboard.core.onboarding import OnboardingController
from autopilot_onboard.core.remediation import PACKAGE_INSTALLER, INSTALL_SCRIPT
from autopilot_onboard.models.outcome import OutcomeStatus, FailureReason
from config.settings import DOCUMENTATION_URL

from conftest import CONFIGURE_LIST_NO_SECRET, fail


class TestOutcomes:

    def test_complete(self, settings, make_runner):
        outcome = OnboardingController(settings, runner=make_runner(tool=True)).run()

        assert outcome.status == OutcomeStatus.COMPLETE
        assert outcome.reason is None
        assert outcome.proceed
        assert outcome.warnings == []
        assert outcome.documentation_url is None
        assert outcome.completed_at is not None

    def test_secret_missing_warns(self, settings, make_runner):
        runner = make_runner(tool=True, configure_list=CONFIGURE_LIST_NO_SECRET)
        outcome = OnboardingController(settings, runner=runner).run()

        assert outcome.status == OutcomeStatus.COMPLETE_WITH_CREDENTIAL_WARNING
        assert outcome.proceed
        assert any("secret_key" in w for w in outcome.warnings)

    def test_secondary_cli_absent_fails_even_after_install(self, settings, make_runner):
        runner = make_runner(aws=False, extra=["pip"])
        runner.on(["pip", "install"], runner.installer())

        outcome = OnboardingController(settings, runner=runner).run()

        assert outcome.tool_stage.success is True
        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.reason == FailureReason.PREREQUISITE_MISSING
        assert outcome.documentation_url == DOCUMENTATION_URL
        assert not outcome.proceed

    def test_chain_exhausted(self, settings, make_runner):
        runner = make_runner(extra=["pip", "curl", "bash", "sudo"])
        runner.on(["pip", "install"], fail())
        runner.on(["sudo", "-n", "bash"], fail())

        outcome = OnboardingController(settings, runner=runner).run()

        assert outcome.status == OutcomeStatus.FAILED
        assert outcome.reason == FailureReason.REMEDIATION_EXHAUSTED
        assert outcome.remediation_steps_exhausted == [PACKAGE_INSTALLER, INSTALL_SCRIPT]
        assert outcome.documentation_url == DOCUMENTATION_URL
        # one attempt per step, nothing retried
        assert len(runner.install_calls) == 2

    def test_credential_gate_runs_after_failed_tool_stage(self, settings, make_runner):
        runner = make_runner()
        outcome = OnboardingController(settings, runner=runner).run()

        assert outcome.credentials.cli_present is True
        assert ["aws", "configure", "list"] in runner.calls

    def test_idempotent_on_ready_environment(self, settings, make_runner):
        runner = make_runner(tool=True, uvx=True, extra=["uv", "pip", "curl", "bash", "sudo"])
        controller = OnboardingController(settings, runner=runner)

        first = controller.run()
        calls_after_first = len(runner.calls)
        second = controller.run()

        assert first.status == second.status == OutcomeStatus.COMPLETE
        assert runner.install_calls == []
        assert len(runner.calls) == 2 * calls_after_first

    def test_installed_tool_is_complete_on_next_run(self, settings, make_runner):
        runner = make_runner(extra=["pip"])
        runner.on(["pip", "install"], runner.installer())

        first = OnboardingController(settings, runner=runner).run()
        installs = len(runner.install_calls)
        second = OnboardingController(settings, runner=runner).run()

        assert first.tool_stage.method == PACKAGE_INSTALLER
        assert second.tool_stage.method == "preinstalled"
        assert second.status == OutcomeStatus.COMPLETE
        assert len(runner.install_calls) == installs

    def test_json_envelope(self, settings, make_runner):
        outcome = OnboardingController(settings, runner=make_runner(tool=True)).run()
        data = json.loads(outcome.to_json_envelope())

        assert data["status"] == "complete"
        assert data["tool_stage"]["method"] == "preinstalled"
        assert data["credentials"]["cli_version"] == "2.15.30"
