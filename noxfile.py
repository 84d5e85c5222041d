import nox


source_code = ("src/", "tests/", "noxfile.py")


def tests_impl(session):
    # Install deps and the package itself.
    session.install("-r", "dev-requirements.txt")
    session.install(".")

    # Show the pip version.
    session.run("pip", "--version")
    # Print the Python version and bytesize.
    session.run("python", "--version")
    session.run("python", "-c", "import struct; print(struct.calcsize('P') * 8)")

    session.run(
        "pytest",
        "-r",
        "a",
        "--tb=native",
        "--cov=xhrmock",
        *(session.posargs or ("tests/",)),
        env={"PYTHONWARNINGS": "always::DeprecationWarning"}
    )
    session.run("coverage", "xml")


@nox.session(python=["3.8", "3.9", "3.10", "3.11", "3.12"])
def test(session):
    tests_impl(session)


@nox.session()
def blacken(session):
    """Run black code formatter."""
    session.install("black")
    session.run("black", *source_code)

    lint(session)


@nox.session
def lint(session):
    session.install("flake8", "black")
    session.run("flake8", "--version")
    session.run("black", "--version")
    session.run("black", "--check", *source_code)
    session.run("flake8", "--max-line-length=88", *source_code)
