from typing import TYPE_CHECKING, Optional

from invocations import checks
from invocations.packaging import release
from invocations.pytest import coverage as coverage_
from invocations.pytest import test as test_

from invoke import Collection, Exit, task

if TYPE_CHECKING:
    from invoke import Context


@task
def test(
    c: "Context",
    verbose: bool = False,
    color: bool = True,
    capture: str = "sys",
    module: Optional[str] = None,
    k: Optional[str] = None,
    x: bool = False,
    opts: str = "",
    pty: bool = True,
) -> None:
    """
    Run pytest. See `invocations.pytest.test` for details.
    """
    test_(
        c,
        verbose=verbose,
        color=color,
        capture=capture,
        module=module,
        k=k,
        x=x,
        opts=opts,
        pty=pty,
    )


@task(help=test.help)  # type: ignore
def integration(
    c: "Context", opts: Optional[str] = None, pty: bool = True
) -> None:
    """
    Run the integration test suite against the installed binary. Slow-ish!
    """
    # The integration suite shells out to the real console script.
    if not c.run("which timed-writer", hide=True, warn=True):
        err = "No timed-writer on $PATH - did you 'pip install -e .'?"
        raise Exit(err)
    opts = opts or ""
    opts += " integration/"
    test(c, opts=opts, pty=pty)


@task
def coverage(
    c: "Context", report: str = "term", opts: str = "", codecov: bool = False
) -> None:
    """
    Run pytest in coverage mode. See `invocations.pytest.coverage` for details.
    """
    coverage_(
        c,
        report=report,
        opts=opts,
        tester=test,
        additional_testers=[integration],
        codecov=codecov,
    )


ns = Collection(
    test,
    coverage,
    integration,
    release,
    checks.blacken,
    checks,
)
ns.configure(
    {
        "blacken": {
            r"find_opts": "-and -not \\( -path './build*' \\)"  # noqa
        },
        "packaging": {
            "wheel": True,
            "check_desc": True,
        },
    }
)
