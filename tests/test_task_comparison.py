"""Tests for task definition diffing."""

from factories import make_revision

from ecs_pilot.core.types import ContainerDefinition, Difference, DifferenceKind
from ecs_pilot.features.task.comparison import diff_task_definitions, normalize_task_definition


def test_identical_revisions_have_no_differences():
    """Same cpu, memory, images and environment produce an empty list."""
    current = make_revision(7)
    target = make_revision(6)

    assert diff_task_definitions(current, target) == []


def test_image_change_only():
    current = make_revision(7, containers=(ContainerDefinition("app", "myapp:1.0", (("ENV", "prod"),)),))
    target = make_revision(6, containers=(ContainerDefinition("app", "myapp:1.1", (("ENV", "prod"),)),))

    differences = diff_task_definitions(current, target)

    assert differences == [Difference(DifferenceKind.IMAGE, "myapp:1.0", "myapp:1.1", "app")]


def test_cpu_and_memory_changes_come_in_order():
    current = make_revision(7, cpu="256", memory="512")
    target = make_revision(6, cpu="512", memory="1024")

    differences = diff_task_definitions(current, target)

    assert [d.kind for d in differences] == [DifferenceKind.CPU, DifferenceKind.MEMORY]
    assert (differences[0].current, differences[0].target) == ("256", "512")
    assert (differences[1].current, differences[1].target) == ("512", "1024")


def test_environment_change_names_container_without_values():
    current = make_revision(7, containers=(ContainerDefinition("app", "myapp:1.0", (("ENV", "prod"),)),))
    target = make_revision(6, containers=(ContainerDefinition("app", "myapp:1.0", (("ENV", "staging"),)),))

    differences = diff_task_definitions(current, target)

    assert differences == [Difference(DifferenceKind.ENVIRONMENT, None, None, "app")]


def test_environment_comparison_is_order_sensitive():
    current = make_revision(7, containers=(ContainerDefinition("app", "myapp:1.0", (("A", "1"), ("B", "2"))),))
    target = make_revision(6, containers=(ContainerDefinition("app", "myapp:1.0", (("B", "2"), ("A", "1"))),))

    differences = diff_task_definitions(current, target)

    assert [d.kind for d in differences] == [DifferenceKind.ENVIRONMENT]


def test_image_is_compared_verbatim():
    current = make_revision(7, containers=(ContainerDefinition("app", "repo/myapp:1.0"),))
    target = make_revision(6, containers=(ContainerDefinition("app", "registry.example.com/repo/myapp:1.0"),))

    differences = diff_task_definitions(current, target)

    assert differences[0].kind is DifferenceKind.IMAGE


def test_per_container_order_follows_current():
    current = make_revision(
        7,
        cpu="256",
        containers=(
            ContainerDefinition("web", "nginx:1", (("X", "1"),)),
            ContainerDefinition("worker", "worker:1"),
        ),
    )
    target = make_revision(
        6,
        cpu="512",
        containers=(
            ContainerDefinition("worker", "worker:2"),
            ContainerDefinition("web", "nginx:2", (("X", "2"),)),
        ),
    )

    differences = diff_task_definitions(current, target)

    assert [(d.kind, d.container) for d in differences] == [
        (DifferenceKind.CPU, None),
        (DifferenceKind.IMAGE, "web"),
        (DifferenceKind.ENVIRONMENT, "web"),
        (DifferenceKind.IMAGE, "worker"),
    ]


def test_container_membership_changes_come_last():
    current = make_revision(
        7,
        memory="512",
        containers=(ContainerDefinition("app", "myapp:1.0"), ContainerDefinition("sidecar", "envoy:1")),
    )
    target = make_revision(
        6,
        memory="1024",
        containers=(ContainerDefinition("app", "myapp:0.9"), ContainerDefinition("metrics", "agent:3")),
    )

    differences = diff_task_definitions(current, target)

    assert differences == [
        Difference(DifferenceKind.MEMORY, "512", "1024"),
        Difference(DifferenceKind.IMAGE, "myapp:1.0", "myapp:0.9", "app"),
        Difference(DifferenceKind.CONTAINER, "envoy:1", None, "sidecar"),
        Difference(DifferenceKind.CONTAINER, None, "agent:3", "metrics"),
    ]


def test_diff_is_reversible():
    """Swapping the arguments swaps current/target at the same kind and container."""
    a = make_revision(
        7,
        cpu="256",
        memory="512",
        containers=(
            ContainerDefinition("app", "myapp:1.0", (("ENV", "prod"),)),
            ContainerDefinition("sidecar", "envoy:1"),
        ),
    )
    b = make_revision(
        6,
        cpu="1024",
        memory="512",
        containers=(
            ContainerDefinition("app", "myapp:1.1", (("ENV", "dev"),)),
            ContainerDefinition("metrics", "agent:3"),
        ),
    )

    forward = diff_task_definitions(a, b)
    backward = diff_task_definitions(b, a)

    def key(difference: Difference) -> tuple:
        return (difference.kind.value, difference.container or "", difference.current or "", difference.target or "")

    assert sorted(forward, key=key) == sorted((d.reversed() for d in backward), key=key)


def test_normalize_task_definition_keeps_comparison_fields():
    raw = {
        "taskDefinitionArn": "arn:aws:ecs:us-east-1:123456789012:task-definition/web-app:5",
        "family": "web-app",
        "revision": 5,
        "status": "ACTIVE",
        "cpu": "256",
        "memory": "512",
        "containerDefinitions": [
            {
                "name": "app",
                "image": "myapp:1.0",
                "environment": [{"name": "ENV", "value": "prod"}, {"name": "DEBUG", "value": "0"}],
                "portMappings": [{"containerPort": 80}],
            },
        ],
    }

    revision = normalize_task_definition(raw)

    assert revision.revision == 5
    assert revision.cpu == "256"
    assert revision.container_definitions == (
        ContainerDefinition("app", "myapp:1.0", (("ENV", "prod"), ("DEBUG", "0"))),
    )
