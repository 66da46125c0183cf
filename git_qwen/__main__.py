from git_qwen.cli.main import run

run()
