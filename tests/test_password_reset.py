from clinic_agenda.domain.accounts.password_reset import determine_password_redirect


def test_redirects_with_next_path():
    assert (
        determine_password_redirect(False, True, "/dashboard/agenda")
        == "/change-password?next=%2Fdashboard%2Fagenda"
    )


def test_no_redirect_while_loading():
    assert determine_password_redirect(True, True, "/dashboard") is None


def test_no_redirect_when_not_required():
    assert determine_password_redirect(False, False, "/dashboard") is None


def test_no_redirect_on_change_password_routes():
    assert determine_password_redirect(False, True, "/change-password") is None
    assert determine_password_redirect(False, True, "/change-password/confirm") is None


def test_no_redirect_without_path():
    assert determine_password_redirect(False, True, None) is None
    assert determine_password_redirect(False, True, "") is None
