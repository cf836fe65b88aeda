# examples/registration_bot.py
# Registers a fresh user, logs out, logs back in.
#   python -m demoshop.runner run examples.registration_bot:run --runs 3 --seed 7

from demoshop.factories import UserFactory
from demoshop.pages import HeaderComponent, LoginPage, RegisterPage
from demoshop.scenarios import ScenarioFactory
from demoshop.waits import eventually


def run(page, data, settings):
    user = UserFactory(data).create_valid_user()

    register = RegisterPage(page, settings)
    eventually(register.open, timeout_s=15, label="open register page")
    register.register(user)

    def registered():
        assert register.registration_succeeded(), f"registration did not complete for {user.email}"

    eventually(registered, timeout_s=10, interval_s=0.3, label="registration result")

    header = HeaderComponent(page, settings)
    header.log_out()

    login = LoginPage(page, settings)
    login.open()
    login.login(user.email, user.password)

    def logged_in():
        assert header.is_logged_in(), f"login failed: {login.error_text()!r}"

    eventually(logged_in, timeout_s=10, interval_s=0.3, label="logged in")


def run_invalid(page, data, settings):
    """Every invalid variant must be rejected with a validation message."""
    scenario = ScenarioFactory(data).create_scenario("registration_errors")
    register = RegisterPage(page, settings)

    for variant in scenario.invalid_users:
        register.open()
        register.register(variant.user)

        def rejected():
            assert not register.registration_succeeded(), f"{variant.defect.value} was accepted"
            assert register.validation_errors(), f"no validation message for {variant.defect.value}"

        eventually(rejected, timeout_s=8, interval_s=0.3, label=variant.defect.value)
