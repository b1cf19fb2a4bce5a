from itertools import chain
from pathlib import Path
from shutil import rmtree

from invoke import task

TOP_DIR = Path(__file__).parent
DOC_DIR = TOP_DIR / "docs"
SRC_DIR = TOP_DIR / "src"
EXAMPLE_DIR = TOP_DIR / "examples" / "umami"
SRC_ENV = {"PYTHONPATH": f"{SRC_DIR}:{EXAMPLE_DIR}"}


def source_arg(pattern):
    """Converts a source pattern to a command line argument."""
    if pattern is None:
        paths = chain(
            SRC_DIR.glob("**/*.py"),
            EXAMPLE_DIR.glob("*.py"),
            (TOP_DIR / "tests").glob("**/*.py"),
        )
    else:
        paths = Path.cwd().glob(pattern)
    for path in paths:
        yield str(path)


def remove_dir(path):
    """Recursively removes a directory."""
    if path.exists():
        rmtree(path)


@task
def clean(c):
    """Clean up our output."""
    print("Cleaning up...")
    remove_dir(DOC_DIR)
    for cache in (".pytest_cache", ".mypy_cache"):
        remove_dir(TOP_DIR / cache)


@task
def lint(c, src=None, html=None):
    """Check sources with PyLint, optionally writing an HTML report."""
    print("Checking sources with PyLint...")
    cmd = ["pylint", *sorted(set(source_arg(src)))]
    if html is not None:
        json_file = TOP_DIR / "pylint.json"
        cmd += [
            "--load-plugins=pylint_json2html",
            "--output-format=jsonextended",
            f">{json_file}",
        ]
    with c.cd(str(TOP_DIR)):
        c.run(" ".join(cmd), env=SRC_ENV, warn=True, pty=True)
    if html is not None:
        c.run(f"pylint-json2html -f jsonextended -o {html} {json_file}")


@task
def types(c, src=None):
    """Check sources with mypy."""
    print("Checking sources with mypy...")
    # The example modules import each other by their plain names.
    cmd = ["mypy", "--explicit-package-bases", *sorted(set(source_arg(src)))]
    with c.cd(str(TOP_DIR)):
        c.run(" ".join(cmd), env={"MYPYPATH": SRC_ENV["PYTHONPATH"]}, warn=True, pty=True)


@task
def apidocs(c):
    """Generate API documentation as HTML files."""
    api_dir = DOC_DIR / "api"
    remove_dir(api_dir)
    api_dir.mkdir(parents=True)
    cmd = [
        "pydoctor",
        "--make-html",
        f"--html-output={api_dir}",
        "--project-name=locust-eggs",
        "--intersphinx=https://docs.python.org/3/objects.inv",
        f"{SRC_DIR}/locusteggs",
    ]
    c.run(" ".join(cmd))


@task
def readme(c):
    """Render README.md to HTML."""
    print("Rendering README...")
    DOC_DIR.mkdir(exist_ok=True)
    c.run(f"markdown_py -f {DOC_DIR / 'README.html'} {TOP_DIR / 'README.md'}")


@task(post=[apidocs, readme])
def docs(c):
    """Generate documentation as HTML files."""


@task
def unittest(c, junit_xml=None):
    """Run unit tests."""
    args = ["pytest"]
    if junit_xml is not None:
        args.append(f"--junit-xml={junit_xml}")
    args.append("tests")
    with c.cd(str(TOP_DIR)):
        c.run(" ".join(args), env=SRC_ENV, pty=True)


@task(post=[unittest, types, lint])
def test(c):
    """Run all tests."""


@task
def umami(c, host, users=10, run_time="1m"):
    """Run the Umami example load test headless against HOST."""
    cmd = [
        "locust",
        f"--locustfile={EXAMPLE_DIR / 'locustfile.py'}",
        f"--host={host}",
        "--headless",
        f"--users={users}",
        f"--run-time={run_time}",
    ]
    with c.cd(str(TOP_DIR)):
        c.run(" ".join(cmd), env=SRC_ENV, pty=True)
