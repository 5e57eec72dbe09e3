"""Tests for forwarding address validation and the wizard flow."""

import pytest

from sshdock.forwarding.wizard import (
    ForwardingWizard,
    WizardStep,
    RECENTLY_USED,
    validate_address,
    build_spec,
)

from conftest import FakeShell


class TestValidateAddress:

    @pytest.mark.parametrize("text", ["9000", "0", "65535", "localhost:9000", "10.0.0.1:22"])
    def test_valid_without_domain(self, text):
        assert validate_address(text, domain_required=False) is None

    @pytest.mark.parametrize("text", ["", "65536", "99999", "localhost:", ":9000",
                                      "host:port", "a b:80", "123456", "1:2:3"])
    def test_invalid(self, text):
        assert validate_address(text, domain_required=False) is not None

    def test_domain_required(self):
        assert validate_address("9000", domain_required=True) is not None
        assert validate_address("localhost:9000", domain_required=True) is None

    def test_messages(self):
        assert validate_address("x", True) == \
            "Please enter a domain and port in range 0 - 65535 (e. g. localhost:9000)"
        assert "(optional)" in validate_address("x", False)


def test_build_spec():
    assert build_spec("-L", "localhost:9000", "localhost:9001") == "-L localhost:9000:localhost:9001"
    assert build_spec("-D", "localhost:1080") == "-D localhost:1080"


class TestForwardingWizard:

    def test_local_to_remote(self, settings_manager):
        shell = FakeShell(picks=["Local to remote"], prompts=["9000", "localhost:9001"])
        wizard = ForwardingWizard(shell, settings_manager)
        result = wizard.run()
        assert result.spec == "-L 9000:localhost:9001"
        assert not result.from_recent
        assert wizard.step == WizardStep.BUILT
        assert shell.pick_calls[0][1] == "Select forwarding type..."

    def test_remote_to_local(self, settings_manager):
        shell = FakeShell(picks=["Remote to local"], prompts=["localhost:8080", "localhost:80"])
        result = ForwardingWizard(shell, settings_manager).run()
        assert result.spec == "-R localhost:8080:localhost:80"

    def test_socks_asks_once(self, settings_manager):
        shell = FakeShell(picks=["SOCKS"], prompts=["localhost:1080"])
        result = ForwardingWizard(shell, settings_manager).run()
        assert result.spec == "-D localhost:1080"
        assert len(shell.prompt_calls) == 1

    def test_invalid_input_is_reprompted(self, settings_manager):
        shell = FakeShell(picks=["SOCKS"], prompts=["1080", "localhost:1080"])
        result = ForwardingWizard(shell, settings_manager).run()
        assert result.spec == "-D localhost:1080"
        assert len(shell.validation_errors) == 1

    def test_second_address_requires_domain(self, settings_manager):
        shell = FakeShell(picks=["Local to remote"], prompts=["9000", "9001", "db:5432"])
        result = ForwardingWizard(shell, settings_manager).run()
        assert result.spec == "-L 9000:db:5432"

    @pytest.mark.parametrize("picks, prompts", [
        ([], []),
        (["Local to remote"], []),
        (["Local to remote"], ["9000"]),
        (["SOCKS"], []),
    ])
    def test_cancel_at_any_step(self, settings_manager, picks, prompts):
        shell = FakeShell(picks=picks, prompts=prompts)
        wizard = ForwardingWizard(shell, settings_manager)
        assert wizard.run() is None
        assert wizard.step == WizardStep.CANCELLED
        assert settings_manager.settings.recently_used_forwardings == []

    def test_recently_used_only_offered_when_present(self, settings_manager):
        wizard = ForwardingWizard(FakeShell(), settings_manager)
        assert RECENTLY_USED not in wizard.type_labels()
        settings_manager.settings.recently_used_forwardings = ["-D localhost:1080"]
        assert wizard.type_labels()[-1] == RECENTLY_USED

    def test_pick_from_recent(self, settings_manager):
        settings_manager.settings.recently_used_forwardings = ["-D localhost:1080"]
        shell = FakeShell(picks=[RECENTLY_USED, "-D localhost:1080"])
        result = ForwardingWizard(shell, settings_manager).run()
        assert result.spec == "-D localhost:1080"
        assert result.from_recent
        assert shell.pick_calls[1][1] == "Select forwarding arguments from recently used..."

    def test_offer_to_remember_yes(self, settings_manager):
        shell = FakeShell(answers=["Yes"])
        wizard = ForwardingWizard(shell, settings_manager)
        assert wizard.offer_to_remember("-L 9000:localhost:9001")
        assert settings_manager.settings.recently_used_forwardings == ["-L 9000:localhost:9001"]
        assert settings_manager.config_path.exists()
        assert shell.infos == [("Want to save this forwarding in recently used?", ("Yes",))]

    def test_offer_to_remember_dismissed(self, settings_manager):
        wizard = ForwardingWizard(FakeShell(), settings_manager)
        assert not wizard.offer_to_remember("-L 9000:localhost:9001")
        assert settings_manager.settings.recently_used_forwardings == []

    def test_known_spec_is_not_offered_again(self, settings_manager):
        settings_manager.settings.recently_used_forwardings = ["-D localhost:1080"]
        shell = FakeShell(answers=["Yes"])
        assert not ForwardingWizard(shell, settings_manager).offer_to_remember("-D localhost:1080")
        assert shell.infos == []
