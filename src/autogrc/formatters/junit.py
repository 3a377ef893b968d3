"""JUnit XML formatter for CI/CD integration.

Each application is a test suite and each of its framework scores a test
case, so compliance regressions show up in standard CI test reports.
"""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from xml.dom import minidom
from xml.etree import ElementTree as ET

from ..models.scores import ApplicationScorecard


def export_junit_results(
    scorecards: list[ApplicationScorecard],
    output_path: Path,
    fail_on: list[str] | None = None,
    project_name: str = "AutoGRC",
) -> dict:
    """Export framework scores as JUnit XML.

    Args:
        scorecards: Scored applications.
        output_path: Path to write the XML file.
        fail_on: Statuses to mark as failures. Default: critical.
        project_name: Name for the testsuites element.

    Returns:
        Dict with: path, total_tests, failures, passed.
    """
    if fail_on is None:
        fail_on = ["critical"]
    fail_set = set(fail_on)

    testsuites = ET.Element("testsuites")
    testsuites.set("name", project_name)
    testsuites.set("timestamp", datetime.now().strftime("%Y-%m-%dT%H:%M:%S"))

    total_tests = 0
    total_failures = 0

    for sc in scorecards:
        if not sc.framework_scores:
            continue

        suite_name = sc.application.name or sc.application.id
        testsuite = ET.SubElement(testsuites, "testsuite")
        testsuite.set("name", suite_name)
        testsuite.set("tests", str(len(sc.framework_scores)))

        suite_failures = 0

        for fs in sc.framework_scores:
            total_tests += 1

            testcase = ET.SubElement(testsuite, "testcase")
            testcase.set("name", f"{fs.framework_name}: {fs.score}%")
            testcase.set("classname", suite_name)

            status = fs.status.value
            if status in fail_set:
                total_failures += 1
                suite_failures += 1

                failure = ET.SubElement(testcase, "failure")
                failure.set("message", f"[{status.upper()}] {fs.framework_name} at {fs.score}%")
                failure.set("type", status)
                failure.text = "\n".join([
                    f"Score: {fs.score}%",
                    f"Passing controls: {fs.passed_controls}",
                    f"Partial controls: {fs.partial_controls}",
                    f"Total controls: {fs.total_controls}",
                ])

        testsuite.set("failures", str(suite_failures))
        testsuite.set("errors", "0")
        testsuite.set("skipped", "0")

    testsuites.set("tests", str(total_tests))
    testsuites.set("failures", str(total_failures))
    testsuites.set("errors", "0")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    # Pretty-print XML
    rough = ET.tostring(testsuites, encoding="unicode")
    dom = minidom.parseString(rough)
    xml_str = dom.toprettyxml(indent="  ", encoding="UTF-8")
    output_path.write_bytes(xml_str)

    return {
        "path": str(output_path),
        "total_tests": total_tests,
        "failures": total_failures,
        "passed": total_tests - total_failures,
    }
