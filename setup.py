from setuptools import find_packages, setup

package_name = "reach_study"

setup(
    name=package_name,
    version="0.1.0",
    packages=find_packages(exclude=["test"]),
    data_files=[
        ("share/ament_index/resource_index/packages", ["resource/" + package_name]),
        ("share/" + package_name, ["package.xml"]),
        ("share/" + package_name + "/config", ["config/reach_study.yaml"]),
    ],
    # ROS 2 / MoveIt dependencies (rclpy, moveit_py, *_msgs, ament_index_python) come from package.xml.
    install_requires=["setuptools", "numpy", "pandas", "PyYAML", "trimesh"],
    extras_require={"test": ["pytest"]},
    zip_safe=True,
    maintainer="you",
    maintainer_email="you@example.com",
    description="Reach study scoring plugins (distance / joint penalty / manipulability) and a persistent reach database.",
    license="Apache-2.0",
    tests_require=["pytest"],
    entry_points={
        "console_scripts": [
            "reach_db = reach_study.scripts.reach_db:main",
            "reach_rescore = reach_study.scripts.rescore:main",
        ],
    },
)
