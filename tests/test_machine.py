import unittest
from datetime import datetime, timezone

from kube_wizard.favourites import Favourite
from kube_wizard.history import HistoryEntry
from kube_wizard.hotkeys import Binding
from kube_wizard.kubectl import CommandResult
from kube_wizard.outputs import SavedOutputGroup
from kube_wizard.wizard import events as ev
from kube_wizard.wizard import tasks as tk
from kube_wizard.wizard.builder import Action, ResourceKind
from kube_wizard.wizard.machine import dispatch, format_connectivity, format_output, initial_state
from kube_wizard.wizard.menus import MenuId, menu_for
from kube_wizard.wizard.state import Screen, Selections, StatusLevel, WizardState

# Indexes into the static menus.
MAIN_RUN, MAIN_CUSTOM, MAIN_FAVOURITES, MAIN_HISTORY, MAIN_SAVED, MAIN_HOTKEYS = range(6)
MAIN_CONTEXTS, MAIN_CONNECTIVITY, MAIN_EXIT = 6, 7, 8
PODS, DEPLOYMENTS, SECRETS = 0, 1, 5
FLAGS_DONE, FIRST_FLAG = 0, 2


def feed(state: WizardState, *events: ev.Event) -> tuple[WizardState, tuple[tk.Task, ...]]:
    tasks: tuple[tk.Task, ...] = ()
    for event in events:
        state, tasks = dispatch(state, event)
    return state, tasks


def pods_action(state: WizardState, action_index: int) -> tuple[WizardState, tuple[tk.Task, ...]]:
    return feed(state, ev.Confirm(MAIN_RUN), ev.Confirm(PODS), ev.Confirm(action_index))


class StartupTests(unittest.TestCase):
    def test_started_loads_hotkeys_silently(self) -> None:
        state, tasks = dispatch(initial_state(), ev.Started())
        self.assertEqual(tasks, (tk.LoadHotkeys(show=False),))
        self.assertTrue(state.pending)

        bindings = (Binding("F1", "pods", "kubectl get pods"),)
        state, tasks = dispatch(state, ev.HotkeysLoaded(bindings=bindings, show=False))
        self.assertEqual(tasks, ())
        self.assertFalse(state.pending)
        self.assertIs(state.screen, Screen.MAIN_MENU)
        self.assertEqual(state.hotkeys, bindings)


class GetFlowTests(unittest.TestCase):
    def test_get_goes_straight_to_flags(self) -> None:
        state, tasks = pods_action(initial_state(), 0)
        self.assertEqual(tasks, ())
        self.assertIs(state.screen, Screen.FLAGS_SELECTION)
        self.assertIs(state.selections.resource, ResourceKind.PODS)
        self.assertIs(state.selections.action, Action.GET)

    def test_toggle_and_done_builds_preview(self) -> None:
        state, _ = pods_action(initial_state(), 0)
        state, _ = feed(state, ev.Toggle(FIRST_FLAG), ev.Confirm(FLAGS_DONE))
        self.assertIs(state.screen, Screen.COMMAND_PREVIEW)
        self.assertEqual(state.selections.command, "kubectl get pods -o wide")

    def test_enter_on_flag_toggles_it(self) -> None:
        state, _ = pods_action(initial_state(), 0)
        state, _ = feed(state, ev.Confirm(FIRST_FLAG))
        self.assertIs(state.screen, Screen.FLAGS_SELECTION)
        self.assertEqual(state.selections.flags, ("-o wide",))
        self.assertEqual(menu_for(state)[FIRST_FLAG].label, "[x] -o wide")

    def test_separator_is_inert(self) -> None:
        state, _ = pods_action(initial_state(), 0)
        after, tasks = feed(state, ev.Confirm(1), ev.Toggle(1))
        self.assertEqual(after, state)
        self.assertEqual(tasks, ())

    def test_default_namespace_is_injected(self) -> None:
        state, _ = pods_action(initial_state("dev"), 0)
        state, _ = feed(state, ev.Confirm(FLAGS_DONE))
        self.assertEqual(state.selections.command, "kubectl get pods -n dev")

    def test_all_namespaces_suppresses_default(self) -> None:
        state, _ = pods_action(initial_state("dev"), 0)
        all_ns = [e.value for e in menu_for(state)].index("-A")
        state, _ = feed(state, ev.Toggle(all_ns), ev.Confirm(FLAGS_DONE))
        self.assertEqual(state.selections.command, "kubectl get pods -A")

    def test_custom_namespace_flow(self) -> None:
        state, _ = pods_action(initial_state("dev"), 0)
        ns_index = len(menu_for(state)) - 1
        state, _ = feed(state, ev.Toggle(ns_index), ev.Confirm(FLAGS_DONE))
        self.assertIs(state.screen, Screen.NAMESPACE_INPUT)

        unchanged, tasks = dispatch(state, ev.Confirm(text="   "))
        self.assertEqual(unchanged, state)
        self.assertEqual(tasks, ())

        state, _ = dispatch(state, ev.Confirm(text="kube-system"))
        self.assertIs(state.screen, Screen.COMMAND_PREVIEW)
        self.assertEqual(state.selections.command, "kubectl get pods -n kube-system")
        self.assertEqual(state.selections.custom_namespace, "kube-system")

    def test_invalid_namespace_is_rejected(self) -> None:
        state, _ = pods_action(initial_state(), 0)
        ns_index = len(menu_for(state)) - 1
        state, _ = feed(state, ev.Toggle(ns_index), ev.Confirm(FLAGS_DONE))
        rejected, tasks = dispatch(state, ev.Confirm(text="Kube_System;ls"))
        self.assertEqual(tasks, ())
        self.assertIs(rejected.screen, Screen.NAMESPACE_INPUT)
        self.assertIs(rejected.status.level, StatusLevel.ERROR)
        self.assertEqual(rejected.selections, state.selections)

    def test_back_from_preview_resets_flags(self) -> None:
        state, _ = pods_action(initial_state(), 0)
        state, _ = feed(state, ev.Toggle(FIRST_FLAG), ev.Confirm(FLAGS_DONE), ev.Back())
        self.assertIs(state.screen, Screen.FLAGS_SELECTION)
        self.assertEqual(state.selections.flags, ())
        self.assertFalse(state.selections.namespace_required)

    def test_back_chain_to_main_menu(self) -> None:
        state, _ = pods_action(initial_state(), 0)
        state, _ = dispatch(state, ev.Back())
        self.assertIs(state.screen, Screen.ACTION_SELECTION)
        self.assertIs(state.selections.resource, ResourceKind.PODS)
        state, _ = dispatch(state, ev.Back())
        self.assertIs(state.screen, Screen.RESOURCE_SELECTION)
        self.assertEqual(state.selections, Selections())
        state, _ = dispatch(state, ev.Back())
        self.assertIs(state.screen, Screen.MAIN_MENU)


class TargetFlowTests(unittest.TestCase):
    def test_describe_fetches_names_then_builds(self) -> None:
        state, tasks = pods_action(initial_state(), 1)
        self.assertEqual(tasks, (tk.FetchNames("pods"),))
        self.assertTrue(state.pending)

        state, _ = dispatch(state, ev.NamesLoaded(names=("api", "web")))
        self.assertIs(state.screen, Screen.RESOURCE_NAME_SELECTION)
        state, _ = feed(state, ev.Confirm(1), ev.Confirm(FLAGS_DONE))
        self.assertEqual(state.selections.command, "kubectl describe pod web")

    def test_back_from_flags_after_name_fetch_lands_on_actions(self) -> None:
        state, _ = pods_action(initial_state(), 1)
        state, _ = feed(state, ev.NamesLoaded(names=("api", "web")), ev.Confirm(1))
        self.assertIs(state.screen, Screen.FLAGS_SELECTION)
        self.assertIs(state.previous, Screen.RESOURCE_NAME_SELECTION)
        state, _ = dispatch(state, ev.Back())
        self.assertIs(state.screen, Screen.ACTION_SELECTION)
        self.assertIs(state.selections.resource, ResourceKind.PODS)

    def test_empty_name_list_shows_placeholder(self) -> None:
        state, _ = pods_action(initial_state(), 1)
        state, _ = dispatch(state, ev.NamesLoaded(names=()))
        entries = menu_for(state)
        self.assertEqual(len(entries), 1)
        self.assertIs(entries[0].id, MenuId.PLACEHOLDER)
        self.assertEqual(feed(state, ev.Confirm(0))[0], state)

    def test_fetch_error_keeps_screen(self) -> None:
        state, _ = pods_action(initial_state(), 1)
        state, _ = dispatch(state, ev.NamesLoaded(error="kubectl error: forbidden"))
        self.assertIs(state.screen, Screen.ACTION_SELECTION)
        self.assertIs(state.status.level, StatusLevel.ERROR)
        self.assertFalse(state.pending)

    def test_deployment_logs(self) -> None:
        state, _ = feed(initial_state(), ev.Confirm(MAIN_RUN), ev.Confirm(DEPLOYMENTS), ev.Confirm(2))
        state, _ = feed(state, ev.NamesLoaded(names=("web",)), ev.Confirm(0), ev.Confirm(FLAGS_DONE))
        self.assertEqual(state.selections.command, "kubectl logs deployment/web")

    def test_delete_confirmation_runs_with_default_namespace(self) -> None:
        state, _ = pods_action(initial_state("dev"), 3)
        state, _ = feed(state, ev.NamesLoaded(names=("web",)), ev.Confirm(0))
        self.assertIs(state.screen, Screen.DELETE_CONFIRMATION)
        state, tasks = dispatch(state, ev.Confirm(0))
        self.assertEqual(tasks, (tk.ExecuteCommand("kubectl delete pod web -n dev"),))

    def test_delete_cancel_refetches_names(self) -> None:
        state, _ = pods_action(initial_state(), 3)
        state, _ = feed(state, ev.NamesLoaded(names=("web",)), ev.Confirm(0))
        _, tasks = dispatch(state, ev.Confirm(1))
        self.assertEqual(tasks, (tk.FetchNames("pods"),))

    def test_secret_field_extraction(self) -> None:
        state, tasks = feed(initial_state(), ev.Confirm(MAIN_RUN), ev.Confirm(SECRETS), ev.Confirm(2))
        self.assertEqual(tasks, (tk.FetchNames("secrets"),))
        state, tasks = feed(state, ev.NamesLoaded(names=("db",)), ev.Confirm(0))
        self.assertEqual(tasks, (tk.FetchSecretKeys("db", ""),))
        state, _ = feed(state, ev.SecretKeysLoaded(keys=("password",)), ev.Confirm(0))
        self.assertIs(state.screen, Screen.COMMAND_PREVIEW)
        self.assertEqual(
            state.selections.command,
            "kubectl get secret db -o go-template='{{index .data \"password\" | base64decode}}'",
        )
        state, _ = dispatch(state, ev.Back())
        self.assertIs(state.screen, Screen.SECRET_FIELD_SELECTION)

    def test_custom_jsonpath_seeds_input(self) -> None:
        state, _ = feed(initial_state(), ev.Confirm(MAIN_RUN), ev.Confirm(SECRETS), ev.Confirm(2))
        state, _ = feed(state, ev.NamesLoaded(names=("db",)), ev.Confirm(0), ev.SecretKeysLoaded(keys=()))
        custom = [e.id for e in menu_for(state)].index(MenuId.SECRET_CUSTOM)
        state, _ = dispatch(state, ev.Confirm(custom))
        self.assertIs(state.screen, Screen.CUSTOM_COMMAND)
        self.assertEqual(state.input_value, "get secret db -o jsonpath=")


class ExecutionTests(unittest.TestCase):
    def _preview(self) -> WizardState:
        state, _ = pods_action(initial_state(), 0)
        return feed(state, ev.Confirm(FLAGS_DONE))[0]

    def test_execute_then_output(self) -> None:
        state, tasks = dispatch(self._preview(), ev.Confirm(0))
        self.assertEqual(tasks, (tk.ExecuteCommand("kubectl get pods"),))
        result = CommandResult("kubectl get pods", output="NAME\nweb\n")
        state, _ = dispatch(state, ev.CommandExecuted(result=result))
        self.assertIs(state.screen, Screen.COMMAND_OUTPUT)
        self.assertEqual(state.output, "Output:\nNAME\nweb\n")

    def test_user_events_ignored_while_pending(self) -> None:
        state, _ = dispatch(self._preview(), ev.Confirm(0))
        for event in (ev.Back(), ev.Confirm(2), ev.KeyPressed("q"), ev.Toggle(0)):
            after, tasks = dispatch(state, event)
            self.assertEqual(after, state)
            self.assertEqual(tasks, ())

    def test_context_error_surfaces_as_status(self) -> None:
        state, _ = dispatch(self._preview(), ev.Confirm(0))
        state, _ = dispatch(state, ev.CommandExecuted(error="no cluster context configured"))
        self.assertIs(state.screen, Screen.COMMAND_PREVIEW)
        self.assertEqual(state.status.text, "no cluster context configured")

    def test_help(self) -> None:
        state, tasks = dispatch(self._preview(), ev.Confirm(1))
        self.assertEqual(tasks, (tk.LoadHelp("kubectl get pods"),))
        state, _ = dispatch(state, ev.HelpLoaded(result=CommandResult("kubectl get pods --help", output="usage")))
        self.assertIs(state.screen, Screen.COMMAND_HELP)
        self.assertEqual(state.output, "Help Output:\nusage")
        state, _ = dispatch(state, ev.Back())
        self.assertIs(state.screen, Screen.COMMAND_PREVIEW)

    def test_q_resets_to_main_menu(self) -> None:
        state, _ = dispatch(self._preview(), ev.KeyPressed("q"))
        self.assertIs(state.screen, Screen.MAIN_MENU)
        self.assertEqual(state.selections, Selections())
        self.assertIsNone(state.status)

    def test_main_menu_resets_selections_from_every_wizard_screen(self) -> None:
        preview = self._preview()

        namespace_input, _ = pods_action(initial_state("dev"), 0)
        ns_index = len(menu_for(namespace_input)) - 1
        namespace_input, _ = feed(namespace_input, ev.Toggle(ns_index), ev.Confirm(FLAGS_DONE))

        delete_confirmation, _ = pods_action(initial_state(), 3)
        delete_confirmation, _ = feed(delete_confirmation, ev.NamesLoaded(names=("web",)), ev.Confirm(0))

        secret_fields, _ = feed(
            initial_state(),
            ev.Confirm(MAIN_RUN), ev.Confirm(SECRETS), ev.Confirm(2),
            ev.NamesLoaded(names=("db",)), ev.Confirm(0), ev.SecretKeysLoaded(keys=("password",)),
        )

        cases = {
            Screen.COMMAND_PREVIEW: preview,
            Screen.NAMESPACE_INPUT: namespace_input,
            Screen.DELETE_CONFIRMATION: delete_confirmation,
            Screen.SECRET_FIELD_SELECTION: secret_fields,
        }
        for screen, state in cases.items():
            with self.subTest(screen=screen):
                self.assertIs(state.screen, screen)
                self.assertNotEqual(state.selections, Selections())
                if screen is Screen.NAMESPACE_INPUT:
                    # shortcut keys are typed into the field
                    self.assertEqual(dispatch(state, ev.KeyPressed("q"))[0], state)
                    state, _ = dispatch(state, ev.Back())
                state, _ = dispatch(state, ev.KeyPressed("q"))
                self.assertIs(state.screen, Screen.MAIN_MENU)
                self.assertEqual(state.selections, Selections())
                self.assertEqual(state.input_value, "")

    def test_exit(self) -> None:
        self.assertTrue(dispatch(initial_state(), ev.Confirm(MAIN_EXIT))[0].quit)
        self.assertTrue(dispatch(initial_state(), ev.KeyPressed("q"))[0].quit)

    def test_custom_command(self) -> None:
        state, _ = feed(initial_state(), ev.Confirm(MAIN_CUSTOM), ev.Confirm(text="get ns"))
        self.assertIs(state.screen, Screen.COMMAND_PREVIEW)
        self.assertEqual(state.selections.command, "kubectl get ns")
        state, _ = dispatch(state, ev.Back())
        self.assertIs(state.screen, Screen.MAIN_MENU)


class SaveOutputTests(unittest.TestCase):
    def _output_state(self) -> WizardState:
        state, _ = pods_action(initial_state(), 0)
        state, _ = feed(state, ev.Confirm(FLAGS_DONE), ev.Confirm(0))
        result = CommandResult("kubectl get pods", output="web")
        return dispatch(state, ev.CommandExecuted(result=result))[0]

    def test_save_asks_for_name_when_command_unknown(self) -> None:
        state, tasks = dispatch(self._output_state(), ev.KeyPressed("s"))
        self.assertEqual(tasks, (tk.AutoSaveOutput("Output:\nweb", "kubectl get pods"),))
        state, _ = dispatch(state, ev.OutputNameRequired())
        self.assertIs(state.screen, Screen.SAVE_OUTPUT_NAME)

        rejected, tasks = dispatch(state, ev.Confirm(text="bad;name"))
        self.assertEqual(tasks, ())
        self.assertIs(rejected.status.level, StatusLevel.ERROR)

        state, tasks = dispatch(state, ev.Confirm(text="pods-output.txt"))
        self.assertEqual(tasks, (tk.SaveOutput("pods-output", "Output:\nweb", "kubectl get pods"),))
        state, _ = dispatch(state, ev.OutputSaved(filename="pods-output.txt"))
        self.assertIs(state.screen, Screen.MAIN_MENU)
        self.assertEqual(state.status.text, "✓ Output saved to: pods-output.txt")

    def test_save_failure_keeps_screen(self) -> None:
        state, _ = dispatch(self._output_state(), ev.KeyPressed("s"))
        state, _ = dispatch(state, ev.OutputSaved(error="disk full"))
        self.assertIs(state.screen, Screen.COMMAND_OUTPUT)
        self.assertEqual(state.status.text, "Failed to save output: disk full")


class SavedOutputsTests(unittest.TestCase):
    def _list_state(self) -> WizardState:
        state, tasks = dispatch(initial_state(), ev.Confirm(MAIN_SAVED))
        self.assertEqual(tasks, (tk.LoadSavedOutputs(),))
        self.assertEqual(menu_for(state)[0].label, "Loading...")
        groups = (
            SavedOutputGroup("nodes", ("nodes",)),
            SavedOutputGroup("pods", ("pods", "pods_v2", "pods_v3")),
        )
        return dispatch(state, ev.SavedOutputsLoaded(groups=groups))[0]

    def test_groups_listed_with_counts(self) -> None:
        entries = menu_for(self._list_state())
        self.assertEqual([(e.label, e.description) for e in entries], [
            ("nodes", "1 version"),
            ("pods", "3 versions"),
        ])

    def test_version_paging_wraps(self) -> None:
        state, _ = dispatch(self._list_state(), ev.Confirm(1))
        self.assertIs(state.screen, Screen.SAVED_OUTPUT_VERSIONS)
        self.assertEqual(state.selected_base, "pods")
        state, _ = dispatch(state, ev.Navigate(-1))
        self.assertEqual(state.version_index, 2)
        state, _ = dispatch(state, ev.Navigate(1))
        self.assertEqual(state.version_index, 0)

    def test_view_and_back_to_versions(self) -> None:
        state, _ = feed(self._list_state(), ev.Confirm(1))
        state, tasks = dispatch(state, ev.Confirm(1))
        self.assertEqual(tasks, (tk.ReadSavedOutput("pods_v2"),))
        state, _ = dispatch(state, ev.SavedOutputRead(name="pods_v2", content="web"))
        self.assertIs(state.screen, Screen.SAVED_OUTPUT_VIEW)
        self.assertEqual(state.output, "web")
        state, _ = dispatch(state, ev.Back())
        self.assertIs(state.screen, Screen.SAVED_OUTPUT_VERSIONS)
        self.assertEqual(state.version_index, 1)

    def test_delete_version_returns_to_group(self) -> None:
        state, _ = feed(self._list_state(), ev.Confirm(1))
        state, tasks = dispatch(state, ev.KeyPressed("d", index=2))
        self.assertEqual(tasks, (tk.DeleteSavedOutput("pods_v3"),))
        groups = (SavedOutputGroup("pods", ("pods", "pods_v2")),)
        state, _ = dispatch(state, ev.SavedOutputsLoaded(groups=groups))
        self.assertIs(state.screen, Screen.SAVED_OUTPUT_VERSIONS)
        self.assertEqual(state.version_index, 1)

    def test_delete_last_version_returns_to_list(self) -> None:
        state, _ = feed(self._list_state(), ev.Confirm(0))
        state, _ = dispatch(state, ev.KeyPressed("d", index=0))
        groups = (SavedOutputGroup("pods", ("pods",)),)
        state, _ = dispatch(state, ev.SavedOutputsLoaded(groups=groups))
        self.assertIs(state.screen, Screen.SAVED_OUTPUTS_LIST)

    def test_rename_group(self) -> None:
        state, _ = dispatch(self._list_state(), ev.KeyPressed("r", index=1))
        self.assertIs(state.screen, Screen.RENAME_SAVED_OUTPUT)
        self.assertEqual(state.input_value, "pods")
        state, tasks = dispatch(state, ev.Confirm(text="workloads"))
        self.assertEqual(tasks, (tk.RenameSavedOutput("pods", "workloads", group=True),))
        groups = (SavedOutputGroup("workloads", ("workloads", "workloads_v2")),)
        state, _ = dispatch(state, ev.SavedOutputsLoaded(groups=groups))
        self.assertIs(state.screen, Screen.SAVED_OUTPUT_VERSIONS)
        self.assertEqual(state.selected_base, "workloads")

    def test_rename_group_to_suffixed_name_opens_bare_group(self) -> None:
        state, _ = feed(self._list_state(), ev.KeyPressed("r", index=1), ev.Confirm(text="snap_v2"))
        self.assertEqual(state.return_base, "snap")
        groups = (SavedOutputGroup("snap", ("snap", "snap_v2", "snap_v3")),)
        state, _ = dispatch(state, ev.SavedOutputsLoaded(groups=groups))
        self.assertIs(state.screen, Screen.SAVED_OUTPUT_VERSIONS)
        self.assertEqual(state.selected_base, "snap")

    def test_failed_rename_reports_error(self) -> None:
        state, _ = feed(self._list_state(), ev.KeyPressed("r", index=1), ev.Confirm(text="nodes"))
        groups = self._list_state().saved_groups
        state, _ = dispatch(state, ev.SavedOutputsLoaded(groups=groups, error="saved output 'nodes' already exists"))
        self.assertIs(state.status.level, StatusLevel.ERROR)
        self.assertIs(state.screen, Screen.SAVED_OUTPUTS_LIST)
        self.assertFalse(state.saved_loading)

    def test_listing_failure_returns_to_main(self) -> None:
        state, _ = dispatch(initial_state(), ev.Confirm(MAIN_SAVED))
        state, _ = dispatch(state, ev.SavedOutputsLoaded(groups=None, error="permission denied"))
        self.assertIs(state.screen, Screen.MAIN_MENU)
        self.assertEqual(state.status.text, "permission denied")


class FavouritesAndHotkeysTests(unittest.TestCase):
    def _favourites_state(self) -> WizardState:
        state = WizardState(hotkeys=())
        state, tasks = dispatch(state, ev.Confirm(MAIN_FAVOURITES))
        self.assertEqual(tasks, (tk.LoadFavourites(),))
        favs = (Favourite("pods", "kubectl get pods"), Favourite("nodes", "kubectl get nodes"))
        return dispatch(state, ev.FavouritesLoaded(favourites=favs))[0]

    def test_missing_store_returns_to_main_menu(self) -> None:
        state, _ = dispatch(initial_state(), ev.Confirm(MAIN_FAVOURITES))
        state, _ = dispatch(state, ev.FavouritesLoaded(error="favourites store not available"))
        self.assertIs(state.screen, Screen.MAIN_MENU)
        self.assertEqual(state.status.text, "favourites store not available")

    def test_run_favourite(self) -> None:
        _, tasks = dispatch(self._favourites_state(), ev.Confirm(1))
        self.assertEqual(tasks, (tk.ExecuteCommand("kubectl get nodes"),))

    def test_delete_and_rename_favourite(self) -> None:
        state = self._favourites_state()
        self.assertEqual(dispatch(state, ev.KeyPressed("d", index=0))[1], (tk.DeleteFavourite(0),))
        state, _ = dispatch(state, ev.KeyPressed("r", index=1))
        self.assertIs(state.screen, Screen.RENAME_FAVOURITE)
        self.assertEqual(state.input_value, "nodes")
        _, tasks = dispatch(state, ev.Confirm(text="all nodes"))
        self.assertEqual(tasks, (tk.RenameFavourite(1, "all nodes"),))

    def test_save_favourite_from_preview(self) -> None:
        state, _ = feed(initial_state(), ev.Confirm(MAIN_CUSTOM), ev.Confirm(text="get ns"), ev.Confirm(2))
        self.assertIs(state.screen, Screen.SAVE_FAVOURITE)
        state, tasks = dispatch(state, ev.Confirm(text="namespaces"))
        self.assertEqual(tasks, (tk.SaveFavourite("namespaces", "kubectl get ns"),))
        state, _ = dispatch(state, ev.FavouriteSaved(favourites=(Favourite("namespaces", "kubectl get ns"),)))
        self.assertIs(state.screen, Screen.MAIN_MENU)
        self.assertEqual(state.status.text, "✓ Favourite saved")

    def test_bind_hotkey(self) -> None:
        state, _ = dispatch(self._favourites_state(), ev.KeyPressed("h", index=0))
        self.assertIs(state.screen, Screen.HOTKEY_BIND)
        state, tasks = dispatch(state, ev.KeyPressed("F3"))
        self.assertEqual(tasks, (tk.BindHotkey("F3", "pods", "kubectl get pods"),))
        binding = Binding("F3", "pods", "kubectl get pods")
        state, _ = dispatch(state, ev.HotkeyBound(key="F3", name="pods", bindings=(binding,)))
        self.assertIs(state.screen, Screen.FAVOURITES_LIST)
        self.assertEqual(state.status.text, "✓ Bound F3 to pods")

    def test_hotkey_runs_bound_command(self) -> None:
        state = WizardState(hotkeys=(Binding("F2", "nodes", "kubectl get nodes"),))
        _, tasks = dispatch(state, ev.KeyPressed("f2"))
        self.assertEqual(tasks, (tk.ExecuteCommand("kubectl get nodes"),))
        self.assertEqual(dispatch(state, ev.KeyPressed("F5"))[1], ())

    def test_hotkeys_ignored_on_text_input(self) -> None:
        state = WizardState(screen=Screen.CUSTOM_COMMAND, hotkeys=(Binding("F2", "n", "kubectl get nodes"),))
        self.assertEqual(dispatch(state, ev.KeyPressed("F2"))[1], ())

    def test_hotkeys_list_shows_all_keys(self) -> None:
        state, _ = dispatch(initial_state(), ev.Confirm(MAIN_HOTKEYS))
        state, _ = dispatch(state, ev.HotkeysLoaded(bindings=(Binding("F1", "pods", "kubectl get pods"),)))
        entries = menu_for(state)
        self.assertEqual(len(entries), 12)
        self.assertEqual(entries[0].description, "pods")
        self.assertEqual(entries[1].description, "(unbound)")
        _, tasks = dispatch(state, ev.KeyPressed("d", index=0))
        self.assertEqual(tasks, (tk.UnbindHotkey("F1"),))


class HistoryTests(unittest.TestCase):
    def test_history_run_and_save_as_favourite(self) -> None:
        when = datetime(2024, 5, 1, tzinfo=timezone.utc)
        entries = (HistoryEntry("kubectl get pods", when),)
        state, tasks = dispatch(initial_state(), ev.Confirm(MAIN_HISTORY))
        self.assertEqual(tasks, (tk.LoadHistory(),))
        state, _ = dispatch(state, ev.HistoryLoaded(entries=entries))
        self.assertIs(state.screen, Screen.COMMAND_HISTORY)
        self.assertEqual(dispatch(state, ev.Confirm(0))[1], (tk.ExecuteCommand("kubectl get pods"),))

        state, _ = dispatch(state, ev.KeyPressed("s", index=0))
        self.assertIs(state.screen, Screen.SAVE_FAVOURITE)
        self.assertEqual(state.selections.command, "kubectl get pods")

    def test_missing_history_store(self) -> None:
        state, _ = dispatch(initial_state(), ev.Confirm(MAIN_HISTORY))
        state, _ = dispatch(state, ev.HistoryLoaded(error="history store not available"))
        self.assertEqual(menu_for(state)[0].label, "History unavailable")


class ContextsTests(unittest.TestCase):
    def test_switch_context(self) -> None:
        state, _ = feed(initial_state(), ev.Confirm(MAIN_CONTEXTS))
        state, tasks = dispatch(state, ev.Confirm(0))
        self.assertEqual(tasks, (tk.LoadContexts(),))
        state, _ = dispatch(state, ev.ContextsLoaded(contexts=("kind", "prod"), current="kind"))
        self.assertEqual(menu_for(state)[0].description, "(current)")
        state, tasks = dispatch(state, ev.Confirm(1))
        self.assertEqual(tasks, (tk.SwitchContext("prod"),))
        state, _ = dispatch(state, ev.ContextSwitched(name="prod"))
        self.assertIs(state.screen, Screen.MAIN_MENU)
        self.assertEqual(state.status.text, "✓ Switched context to prod")

    def test_set_default_namespace(self) -> None:
        state, _ = feed(initial_state(), ev.Confirm(MAIN_CONTEXTS), ev.Confirm(1))
        state, _ = dispatch(state, ev.NamespacesLoaded(namespaces=("default", "dev")))
        state, tasks = dispatch(state, ev.Confirm(1))
        self.assertEqual(tasks, (tk.SetDefaultNamespace("dev"),))
        state, _ = dispatch(state, ev.DefaultNamespaceSet(namespace="dev"))
        self.assertEqual(state.default_namespace, "dev")
        self.assertIs(state.screen, Screen.CONTEXTS_NAMESPACES_MENU)
        self.assertEqual(state.status.text, "✓ Default namespace set to dev")

    def test_context_errors_shown_as_placeholder(self) -> None:
        state, _ = feed(initial_state(), ev.Confirm(MAIN_CONTEXTS), ev.Confirm(0))
        state, _ = dispatch(state, ev.ContextsLoaded(error="kubectl error: no config"))
        self.assertEqual(menu_for(state)[0].label, "Unable to load contexts")


class FormattingTests(unittest.TestCase):
    def test_output_with_stderr(self) -> None:
        result = CommandResult("kubectl get x", output="", error="error: not found")
        self.assertEqual(format_output(result), "Error:\nerror: not found\n\nOutput:\n")

    def test_connectivity_summary_drops_debug_hint(self) -> None:
        output = (
            "Kubernetes control plane is running at https://127.0.0.1:6443\n"
            "\n"
            "To further debug and diagnose cluster problems, use 'kubectl cluster-info dump'.\n"
        )
        text = format_connectivity(CommandResult("kubectl cluster-info", output=output))
        self.assertIn("✅ Connected", text)
        self.assertNotIn("further debug", text)

    def test_connectivity_failure(self) -> None:
        result = CommandResult("kubectl cluster-info", output="Unable to connect to the server: dial tcp")
        self.assertIn("❌ Cannot connect", format_connectivity(result))

    def test_connectivity_error(self) -> None:
        self.assertTrue(format_connectivity(None, "no cluster context configured").startswith("Error:\n"))


if __name__ == "__main__":
    unittest.main()
