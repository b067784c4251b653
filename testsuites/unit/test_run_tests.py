from run_tests import TestRunner, parse_args


def test_command_for_parallel_tagged_ui_run():
    runner = TestRunner(**vars(parse_args(["--suite", "ui", "-n", "4", "--tags", "P0", "smoke"])))

    cmd = runner.build_command()

    assert cmd[3] == "testsuites/ui_testing/tests"
    assert cmd[4:6] == ["-m", "P0 or smoke"]
    assert cmd[cmd.index("-n") + 1] == "4"
    assert "--alluredir" in cmd


def test_browser_options_become_config_overrides():
    runner = TestRunner(**vars(parse_args(["--browser", "firefox", "--no-headless", "--no-allure"])))

    env = runner.build_env()

    assert env["BROWSER_KIND"] == "firefox"
    assert env["BROWSER_HEADLESS"] == "false"
    assert "--alluredir" not in runner.build_command()
