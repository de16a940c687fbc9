import io
import json
import logging
import tempfile
import unittest
from pathlib import Path
from unittest import mock

import main as cli
import settings_generator
from unigma import Unigma
from utilities import interactive_config


def run_cli(argv, stdin=""):
    out, err = io.StringIO(), io.StringIO()
    with mock.patch("sys.stdin", io.StringIO(stdin)), \
            mock.patch("sys.stdout", out), \
            mock.patch("sys.stderr", err):
        code = cli.main(argv)
    return code, out.getvalue(), err.getvalue()


class MainTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp.cleanup)

    def write_config(self, data):
        path = Path(self.tmp.name) / "unigma_config.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    def test_defaults_encipher_stdin(self):
        code, out, _ = run_cli([], "HELLO WORLD\n")
        self.assertEqual(code, 0)
        self.assertEqual(out, "ILBDA AMTAZ\n")

    def test_positions_and_plugboard_flags(self):
        _, out, _ = run_cli(["-p", "xyz", "-b", "ab cd"], "attack at dawn\n")
        self.assertEqual(out, Unigma("XYZ", "AB CD").encipher_text("attack at dawn\n"))

    def test_show_prints_config_and_skips_input(self):
        code, out, err = run_cli(["-s", "-p", "QEV"], "HELLO")
        self.assertEqual(code, 0)
        self.assertEqual(out, "")
        self.assertIn("Positions:  QEV (Left: Q, Middle: E, Right: V)", err)

    def test_bad_positions_exit(self):
        with self.assertRaises(SystemExit) as cm:
            run_cli(["-p", "AB"], "HELLO")
        self.assertTrue(str(cm.exception.code).startswith("Error:"))

    def test_bad_plugboard_exit(self):
        with self.assertRaises(SystemExit) as cm:
            run_cli(["-b", "AB BC"], "HELLO")
        self.assertIn("already used", str(cm.exception.code))

    def test_config_file(self):
        path = self.write_config({"positions": "ADU", "plugboard": "AB"})
        _, out, _ = run_cli(["--config", path], "HELLO")
        self.assertEqual(out, Unigma("ADU", "AB").encipher_text("HELLO"))

    def test_flags_override_config_file(self):
        path = self.write_config({"positions": "ADU", "plugboard": "AB"})
        _, out, _ = run_cli(["--config", path, "-p", "AAA", "-b", ""], "AAAAA")
        self.assertEqual(out, "BDZGO")

    def test_config_missing_keys(self):
        path = self.write_config({"positions": "ADU"})
        with self.assertRaises(SystemExit) as cm:
            run_cli(["--config", path], "")
        self.assertIn("plugboard", str(cm.exception.code))

    def test_config_values_must_be_strings(self):
        for data in ({"positions": 123, "plugboard": ""},
                     {"positions": "AAA", "plugboard": ["AB"]}):
            path = self.write_config(data)
            with self.subTest(data=data), self.assertRaises(SystemExit) as cm:
                run_cli(["--config", path], "HELLO")
            self.assertTrue(str(cm.exception.code).startswith("Error:"))
            self.assertIn("must be a string", str(cm.exception.code))

    def test_config_null_plugboard_means_none(self):
        path = self.write_config({"positions": "AAA", "plugboard": None})
        _, out, _ = run_cli(["--config", path], "AAAAA")
        self.assertEqual(out, "BDZGO")

    def test_interactive_with_no_input_keeps_defaults(self):
        code, out, _ = run_cli(["-i"], "")
        self.assertEqual(code, 0)
        self.assertIn("USING DEFAULT: AAA", out)
        self.assertIn("NO PLUGBOARD", out)

    def test_log_file_needs_debug(self):
        with self.assertRaises(SystemExit), mock.patch("sys.stderr", io.StringIO()):
            cli.parse_args(["--log-file", "unigma.log"])

    def test_log_file_receives_debug_lines(self):
        path = Path(self.tmp.name) / "unigma.log"
        self.addCleanup(cli.debug.disable, "stepping")
        self.addCleanup(self.close_file_handler, path)
        run_cli(["--debug", "stepping", "--log-file", str(path)], "A")
        self.assertIn("[STEPPING] Rotor pos AAB", path.read_text(encoding="utf-8"))

    @staticmethod
    def close_file_handler(path):
        root = logging.getLogger()
        for handler in list(root.handlers):
            if getattr(handler, "baseFilename", None) == str(path.resolve()):
                root.removeHandler(handler)
                handler.close()

    def test_config_file_not_found(self):
        with self.assertRaises(SystemExit):
            run_cli(["--config", str(Path(self.tmp.name) / "nope.json")], "")

    def test_load_config_returns_dict(self):
        path = self.write_config({"positions": "ABC", "plugboard": "", "extra": 1})
        self.assertEqual(cli.load_config(path)["positions"], "ABC")

    def test_interactive_flag_prompts_then_streams(self):
        _, out, _ = run_cli(["-i"], "xyz\n\nHELLO\n")
        self.assertIn("POSITIONS SET TO: XYZ", out)
        self.assertIn("NO PLUGBOARD", out)
        self.assertTrue(out.endswith(Unigma("XYZ").encipher_text("HELLO\n")))

    def test_unknown_debug_component_is_rejected(self):
        with self.assertRaises(SystemExit), mock.patch("sys.stderr", io.StringIO()):
            cli.parse_args(["--debug", "nonsense"])

    def test_wants_prompts(self):
        tty = mock.Mock()
        tty.isatty.return_value = True
        self.assertTrue(cli.wants_prompts(cli.parse_args([]), tty))
        self.assertFalse(cli.wants_prompts(cli.parse_args(["-p", "ABC"]), tty))
        self.assertFalse(cli.wants_prompts(cli.parse_args([]), io.StringIO()))
        self.assertTrue(cli.wants_prompts(cli.parse_args(["-i"]), io.StringIO()))


class InteractiveConfigTests(unittest.TestCase):
    def run_prompts(self, answers):
        replies = iter(answers)
        out = io.StringIO()
        machine = Unigma()
        interactive_config(machine, prompt_fn=lambda _: next(replies), out=out)
        return machine, out.getvalue()

    def test_retries_until_valid(self):
        machine, out = self.run_prompts(["ABCD", "XYZ", "AA BB", "AB CD"])
        self.assertEqual(machine.positions, "XYZ")
        self.assertEqual(machine.plugboard, "AB CD")
        self.assertEqual(out.count("❌"), 2)
        self.assertIn("POSITIONS SET TO: XYZ", out)
        self.assertIn("PLUGBOARD SET TO: AB CD", out)

    def test_end_of_input_keeps_defaults(self):
        def no_more_input(_):
            raise EOFError

        out = io.StringIO()
        machine = Unigma("XYZ", "AB")
        interactive_config(machine, prompt_fn=no_more_input, out=out)
        self.assertEqual(machine.positions, "AAA")
        self.assertEqual(machine.plugboard, "")
        self.assertIn("USING DEFAULT: AAA", out.getvalue())

    def test_end_of_input_after_a_bad_answer(self):
        replies = iter(["AB"])

        def answers(_):
            try:
                return next(replies)
            except StopIteration:
                raise EOFError

        out = io.StringIO()
        machine = Unigma()
        interactive_config(machine, prompt_fn=answers, out=out)
        self.assertEqual(machine.positions, "AAA")
        self.assertEqual(out.getvalue().count("❌"), 1)

    def test_enter_keeps_defaults(self):
        machine, out = self.run_prompts(["", ""])
        self.assertEqual(machine.positions, "AAA")
        self.assertEqual(machine.plugboard, "")
        self.assertIn("USING DEFAULT: AAA", out)
        self.assertIn("NO PLUGBOARD", out)


class SettingsGeneratorTests(unittest.TestCase):
    def test_seeded_settings_are_reproducible(self):
        self.assertEqual(
            settings_generator.make_settings(seed=7),
            settings_generator.make_settings(seed=7),
        )

    def test_settings_are_valid_machine_keys(self):
        for seed in range(20):
            cfg = settings_generator.make_settings(seed=seed, pairs=13)
            pairs = cfg["plugboard"].split()
            self.assertEqual(len(pairs), 13)
            self.assertEqual(len(set("".join(pairs))), 26)
            Unigma(cfg["positions"], cfg["plugboard"])

    def test_zero_pairs(self):
        self.assertEqual(settings_generator.make_settings(seed=1, pairs=0)["plugboard"], "")

    def test_main_writes_loadable_json(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "key.json"
            with mock.patch("sys.stdout", io.StringIO()):
                settings_generator.main(["--seed", "3", "--outfile", str(path)])
            cfg = cli.load_config(path)
            self.assertEqual(len(cfg["plugboard"].split()), settings_generator.DEFAULT_PAIRS)

    def test_rejects_too_many_pairs(self):
        with self.assertRaises(SystemExit), mock.patch("sys.stderr", io.StringIO()):
            settings_generator.parse_cli(["--pairs", "14"])


if __name__ == "__main__":
    unittest.main()
