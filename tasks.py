# type: ignore
from invoke import task


@task
def venv(ctx):
    """Create .venv with test and dev extras."""
    ctx.run("uv sync --all-extras")


@task
def lint(ctx):
    """Ruff check, format check and mypy over src."""
    ctx.run("ruff check src tests", pty=True)
    ctx.run("ruff format --check src tests", pty=True)
    ctx.run("mypy src", pty=True)


@task
def test(ctx):
    """Run tests with coverage information."""
    ctx.run("pytest --cov=powerstrip --cov-report=term-missing", pty=True)


@task
def mock(ctx, port=9999):
    """Run the mock power strip on localhost."""
    ctx.run(f"powerstrip mock --host 127.0.0.1 --port {port}", pty=True)


@task
def build_package(ctx):
    """Build sdist and wheel with uv."""
    ctx.run("rm -rf dist")
    ctx.run("uv build")
