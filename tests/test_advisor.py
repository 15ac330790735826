import copy

from yamlanalyzer.core.config import AnalyzerSettings
from yamlanalyzer.core.loader import YamlLoader
from yamlanalyzer.core.models import Severity
from yamlanalyzer.rules.advisor import ManifestAdvisor

MINIMAL_POD = {"kind": "Pod", "spec": {"containers": [{"name": "app", "image": "nginx"}]}}

COMPLETE_POD = {
    "kind": "Pod",
    "metadata": {"name": "web"},
    "spec": {"containers": [{
        "name": "app",
        "image": "nginx:1.25",
        "resources": {"limits": {"cpu": "500m", "memory": "512Mi"}},
    }]},
}

DEPLOYMENT_TEXT = """apiVersion: apps/v1
kind: Deployment
metadata:
  name: web
spec:
  template:
    spec:
      containers:
        - name: web
          image: nginx
"""


def ids(suggestions):
    return [s.id for s in suggestions]


def test_minimal_pod_gets_name_image_and_resource_suggestions():
    suggestions = ManifestAdvisor().suggest([MINIMAL_POD])

    assert ids(suggestions) == [
        "doc0:missing-name",
        "doc0:container0:unpinned-image",
        "doc0:container0:missing-resources",
    ]
    assert all(s.severity == Severity.ADVISORY for s in suggestions)


def test_complete_pod_gets_none_of_those_suggestions():
    suggestions = ManifestAdvisor().suggest([COMPLETE_POD])
    kinds = {s.id.rsplit(":", 1)[-1] for s in suggestions}
    assert not kinds & {"missing-name", "unpinned-image", "missing-resources"}


def test_suggestion_texts():
    by_id = {s.id: s for s in ManifestAdvisor().suggest([MINIMAL_POD])}

    assert by_id["doc0:missing-name"].suggestion_text == "metadata:\n  name: my-pod"
    assert by_id["doc0:container0:unpinned-image"].suggestion_text == "image: nginx:1.0.0"

    resources = by_id["doc0:container0:missing-resources"].suggestion_text
    assert resources.startswith("resources:\n  requests:\n")
    for fragment in ("cpu: 100m", "memory: 128Mi", "cpu: 500m", "memory: 512Mi"):
        assert fragment in resources


def test_anchor_lines_fall_back_to_text_search():
    text = "kind: Pod\nspec:\n  containers:\n  - name: app\n    image: nginx\n"
    by_id = {s.id: s for s in ManifestAdvisor().suggest([MINIMAL_POD], text)}

    # No metadata anywhere in the text
    assert by_id["doc0:missing-name"].anchor_line == 1
    assert by_id["doc0:container0:unpinned-image"].anchor_line == 5
    assert by_id["doc0:container0:missing-resources"].anchor_line == 4


def test_anchor_lines_use_parser_positions():
    docs = YamlLoader().parse_all(DEPLOYMENT_TEXT)
    suggestions = ManifestAdvisor().suggest(docs, DEPLOYMENT_TEXT)

    assert ids(suggestions) == [
        "doc0:container0:unpinned-image",
        "doc0:container0:missing-resources",
        "doc0:pod-security-context",
    ]
    by_id = {s.id: s for s in suggestions}
    assert by_id["doc0:container0:unpinned-image"].anchor_line == 10
    assert by_id["doc0:container0:missing-resources"].anchor_line == 9
    assert by_id["doc0:pod-security-context"].anchor_line == 5
    assert by_id["doc0:pod-security-context"].suggestion_text == "securityContext:\n  runAsNonRoot: true"


def test_pod_template_with_security_context_is_quiet():
    doc = {
        "kind": "Deployment",
        "metadata": {"name": "web"},
        "spec": {"template": {"spec": {
            "securityContext": {"runAsNonRoot": True},
            "containers": [{"name": "web", "image": "nginx:1.25", "resources": {}}],
        }}},
    }
    assert ManifestAdvisor().suggest([doc]) == []


def test_missing_name_ids_are_unique_across_documents():
    """
    ID UNIQUENESS TEST: two Pods without metadata.name in one stream.
    """
    docs = [{"kind": "Pod"}, {"kind": "Pod"}]
    suggestions = [s for s in ManifestAdvisor().suggest(docs) if s.id.endswith("missing-name")]

    assert len(suggestions) == 2
    assert suggestions[0].id != suggestions[1].id


def test_ids_unique_for_many_containers():
    doc = {"kind": "Pod", "metadata": {"name": "p"}, "spec": {"containers": [
        {"name": "a", "image": "redis"},
        {"name": "b", "image": "redis"},
    ]}}
    all_ids = ids(ManifestAdvisor().suggest([doc, copy.deepcopy(doc)]))
    assert len(all_ids) == 8
    assert len(set(all_ids)) == len(all_ids)


def test_documents_without_kind_are_ignored():
    docs = ["just a scalar", [1, 2], None, {"apiVersion": "v1"}, {"kind": ""}]
    assert ManifestAdvisor().suggest(docs) == []


def test_flat_containers_path():
    doc = {"kind": "Thing", "metadata": {"name": "t"}, "containers": [{"image": "redis"}]}
    suggestions = ManifestAdvisor().suggest([doc])

    assert ids(suggestions) == ["doc0:container0:unpinned-image", "doc0:container0:missing-resources"]
    assert "#0" in suggestions[0].title


def test_first_container_path_wins():
    doc = {
        "kind": "Deployment",
        "metadata": {"name": "web"},
        "spec": {
            "containers": [{"name": "ignored", "image": "busybox"}],
            "template": {"spec": {
                "securityContext": {},
                "containers": [{"name": "web", "image": "nginx:1.25", "resources": {}}],
            }},
        },
    }
    assert ManifestAdvisor().suggest([doc]) == []


def test_odd_container_entries_are_skipped():
    doc = {"kind": "Pod", "metadata": {"name": "p"},
           "spec": {"containers": ["nginx", {"name": "x", "image": 5, "resources": {}}]}}
    assert ManifestAdvisor().suggest([doc]) == []


def test_registry_port_counts_as_a_colon():
    doc = {"kind": "Pod", "metadata": {"name": "p"},
           "spec": {"containers": [{"name": "x", "image": "registry:5000/app", "resources": {}}]}}
    assert ManifestAdvisor().suggest([doc]) == []


def test_settings_change_proposed_values():
    settings = AnalyzerSettings(default_image_tag="2.0", cpu_limit="2", memory_limit="1Gi")
    by_id = {s.id: s for s in ManifestAdvisor(settings).suggest([MINIMAL_POD])}

    assert by_id["doc0:container0:unpinned-image"].suggestion_text == "image: nginx:2.0"
    assert "cpu: 2\n" in by_id["doc0:container0:missing-resources"].suggestion_text
    assert by_id["doc0:container0:missing-resources"].suggestion_text.endswith("memory: 1Gi")


def test_documents_are_not_mutated():
    doc = copy.deepcopy(MINIMAL_POD)
    ManifestAdvisor().suggest([doc])
    assert doc == MINIMAL_POD
