import importlib
import inspect


def test_motion_reexports_exist():
    motion = importlib.import_module("arcmotion.motion")

    for name in [
        "TrajectoryGenerator",
        "CircTrajectoryGenerator",
        "ArcGeometry",
        "ArcPath",
        "TrapezoidProfile",
        "LimitsContainer",
    ]:
        assert hasattr(motion, name), f"arcmotion.motion missing {name}"
        assert inspect.isclass(getattr(motion, name)), f"{name} should be a class"

    assert callable(motion.resolve_arc)


def test_package_exports_public_api():
    pkg = importlib.import_module("arcmotion")
    for name in pkg.__all__:
        assert hasattr(pkg, name), f"arcmotion missing {name}"
    assert issubclass(pkg.CircTrajectoryGenerator, importlib.import_module("arcmotion.motion").TrajectoryGenerator)
