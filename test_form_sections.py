"""
Unit tests for the family sub-form callbacks and list tables.
"""

from datetime import date
from unittest.mock import patch

from onboarding.family import FamilyMember, FamilyState, add_child, add_sibling
from onboarding.form_sections import (
    children_table,
    on_add_child,
    on_add_sibling,
    on_marital_status_change,
    on_remove_child,
    on_remove_sibling,
    on_save_sibling_details,
    on_select_sibling,
    render_submit_button,
    run_pending_submission,
    siblings_table,
    sync_spouse,
)
from onboarding.notifications import NOTICE_KEY
from onboarding.session_manager import SessionManager


def notice(state):
    return state[NOTICE_KEY]


class TestSiblingCallbacks:
    """Sibling list editing through widget callbacks."""

    def test_add_sibling_clears_input(self, mock_session_state):
        SessionManager.initialize()
        mock_session_state['field_new_sibling_name_v0'] = 'Tom'

        on_add_sibling()

        assert SessionManager.get_family_state().sibling_names() == ('Tom',)
        assert mock_session_state['field_new_sibling_name_v0'] == ''

    def test_duplicate_sibling_posts_error_notice(self, mock_session_state):
        SessionManager.initialize()
        SessionManager.set_family_state(add_sibling(FamilyState(), 'Tom'))
        mock_session_state['field_new_sibling_name_v0'] = 'tom'

        on_add_sibling()

        assert SessionManager.get_family_state().sibling_names() == ('Tom',)
        assert notice(mock_session_state).message == "Sibling already exists"
        assert notice(mock_session_state).notification_type == 'error'
        assert mock_session_state['field_new_sibling_name_v0'] == 'tom'

    def test_select_then_save_details(self, mock_session_state):
        SessionManager.initialize()
        SessionManager.set_family_state(add_sibling(FamilyState(), 'Tom'))
        mock_session_state['field_selected_sibling_v0'] = 'Tom'

        on_select_sibling()
        assert mock_session_state['field_edit_marital_status_v0'] is None

        mock_session_state['field_edit_marital_status_v0'] = 'Married'
        mock_session_state['field_edit_employment_status_v0'] = 'Employed'
        on_save_sibling_details()

        assert SessionManager.get_family_state().siblings == (FamilyMember('Tom', 'Married', 'Employed'),)
        assert notice(mock_session_state).message == "Details saved for Tom"

    def test_save_with_one_status_posts_error(self, mock_session_state):
        SessionManager.initialize()
        SessionManager.set_family_state(add_sibling(FamilyState(), 'Tom'))
        mock_session_state['field_selected_sibling_v0'] = 'Tom'
        on_select_sibling()
        mock_session_state['field_edit_marital_status_v0'] = 'Single'

        on_save_sibling_details()

        assert SessionManager.get_family_state().siblings == (FamilyMember('Tom'),)
        assert notice(mock_session_state).message == "Please select both statuses for the sibling"

    def test_remove_selected_sibling_resets_picker(self, mock_session_state):
        SessionManager.initialize()
        SessionManager.set_family_state(add_sibling(FamilyState(), 'Tom'))
        mock_session_state['field_selected_sibling_v0'] = 'Tom'
        on_select_sibling()

        on_remove_sibling(0)

        assert SessionManager.get_family_state().siblings == ()
        assert mock_session_state['field_selected_sibling_v0'] is None

    def test_remove_out_of_range_is_ignored(self, mock_session_state):
        SessionManager.initialize()
        SessionManager.set_family_state(add_sibling(FamilyState(), 'Tom'))

        on_remove_sibling(3)

        assert SessionManager.get_family_state().sibling_names() == ('Tom',)


class TestMarriedCallbacks:
    """Marital status, spouse and children."""

    def test_marital_status_change_switches_branch(self, mock_session_state):
        SessionManager.initialize()
        mock_session_state['field_marital_status_v0'] = 'Married'

        on_marital_status_change()

        assert SessionManager.get_family_state().is_married

    def test_spouse_restored_after_switching_back_to_married(self, mock_session_state):
        SessionManager.initialize()
        mock_session_state['field_marital_status_v0'] = 'Married'
        on_marital_status_change()
        mock_session_state['field_spouse_name_v0'] = 'Priya'
        mock_session_state['field_spouse_employment_status_v0'] = 'Employed'
        sync_spouse()

        mock_session_state['field_marital_status_v0'] = 'Single'
        on_marital_status_change()
        # Unrendered widgets lose their values between runs
        del mock_session_state['field_spouse_name_v0']
        del mock_session_state['field_spouse_employment_status_v0']

        mock_session_state['field_marital_status_v0'] = 'Married'
        on_marital_status_change()

        assert mock_session_state['field_spouse_name_v0'] == 'Priya'
        assert mock_session_state['field_spouse_employment_status_v0'] == 'Employed'
        assert sync_spouse().spouse == FamilyMember('Priya', employment_status='Employed')

    def test_first_switch_to_married_leaves_spouse_inputs_empty(self, mock_session_state):
        SessionManager.initialize()
        mock_session_state['field_marital_status_v0'] = 'Married'

        on_marital_status_change()

        assert mock_session_state['field_spouse_name_v0'] == ''
        assert mock_session_state['field_spouse_employment_status_v0'] is None

    def test_sync_spouse_copies_widgets(self, mock_session_state):
        SessionManager.initialize()
        mock_session_state['field_spouse_name_v0'] = 'Priya '
        mock_session_state['field_spouse_employment_status_v0'] = 'Employed'

        state = sync_spouse()

        assert state.spouse == FamilyMember('Priya', employment_status='Employed')
        assert SessionManager.get_family_state() is state

    def test_add_child_clears_inputs(self, mock_session_state):
        SessionManager.initialize()
        mock_session_state['field_child_name_v0'] = 'Arjun'
        mock_session_state['field_child_gender_v0'] = 'Male'
        mock_session_state['field_child_dob_v0'] = date(2020, 1, 15)

        on_add_child()

        child = SessionManager.get_family_state().children[0]
        assert (child.name, child.gender, child.dob) == ('Arjun', 'Male', date(2020, 1, 15))
        assert mock_session_state['field_child_name_v0'] == ''
        assert mock_session_state['field_child_dob_v0'] is None

    def test_add_child_without_name_posts_error(self, mock_session_state):
        SessionManager.initialize()
        mock_session_state['field_child_gender_v0'] = 'Female'

        on_add_child()

        assert SessionManager.get_family_state().children == ()
        assert notice(mock_session_state).message == "Please enter child name"

    def test_remove_child(self, mock_session_state):
        SessionManager.initialize()
        SessionManager.set_family_state(add_child(FamilyState(), 'Arjun', 'Male'))

        on_remove_child(0)

        assert SessionManager.get_family_state().children == ()


class TestTables:
    """DataFrames shown for the family lists."""

    def test_siblings_table(self):
        state = add_sibling(add_sibling(FamilyState(), 'Tom'), 'Anu')

        table = siblings_table(state)

        assert list(table['Name']) == ['Tom', 'Anu']
        assert list(table['Marital Status']) == ['-', '-']

    def test_empty_children_table_has_columns(self):
        table = children_table(FamilyState())

        assert table.empty
        assert list(table.columns) == ['Name', 'Gender', 'Date of Birth']

    def test_children_table_formats_dates(self):
        state = add_child(FamilyState(), 'Arjun', 'Male', date(2020, 1, 15))

        assert children_table(state).iloc[0]['Date of Birth'] == '15/01/2020'


class TestSubmitButton:
    """Busy state around the submit button."""

    @patch('streamlit.button')
    def test_button_idle(self, mock_button, mock_session_state):
        SessionManager.initialize()

        render_submit_button()

        args, kwargs = mock_button.call_args
        assert args == ("📤 Submit Application",)
        assert kwargs['disabled'] is False
        assert kwargs['on_click'] == SessionManager.begin_submission

    @patch('streamlit.button')
    def test_button_disabled_while_submitting(self, mock_button, mock_session_state):
        SessionManager.initialize()
        SessionManager.begin_submission()

        render_submit_button()

        args, kwargs = mock_button.call_args
        assert args == ("⏳ Submitting...",)
        assert kwargs['disabled'] is True

    @patch('streamlit.rerun')
    @patch('streamlit.spinner')
    @patch('onboarding.form_sections.SubmissionHandler.handle_streamlit_submission')
    def test_pending_submission_runs_under_spinner(self, mock_submit, mock_spinner, mock_rerun,
                                                   mock_session_state):
        SessionManager.initialize()
        SessionManager.begin_submission()

        assert run_pending_submission() is True

        mock_spinner.assert_called_once_with("Submitting...")
        mock_submit.assert_called_once_with()
        mock_rerun.assert_called_once()

    @patch('streamlit.rerun')
    @patch('onboarding.form_sections.SubmissionHandler.handle_streamlit_submission')
    def test_no_submission_without_click(self, mock_submit, mock_rerun, mock_session_state):
        SessionManager.initialize()

        assert run_pending_submission() is False

        mock_submit.assert_not_called()
        mock_rerun.assert_not_called()

    @patch('streamlit.rerun')
    @patch('streamlit.spinner')
    @patch('onboarding.form_sections.SubmissionHandler.handle_streamlit_submission')
    def test_unexpected_error_becomes_notice(self, mock_submit, mock_spinner, mock_rerun, mock_session_state):
        mock_submit.side_effect = RuntimeError("boom")
        SessionManager.initialize()
        SessionManager.begin_submission()

        run_pending_submission()

        assert notice(mock_session_state).notification_type == 'error'
        assert notice(mock_session_state).message.startswith("💻")
        mock_rerun.assert_called_once()
