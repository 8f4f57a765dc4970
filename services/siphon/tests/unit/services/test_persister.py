from pathlib import Path

import pytest
from src.core.errors import PersistError
from src.domain.models import MetricIdentity, StatisticResult
from src.services.persister import append_result, iter_documents, output_path


def _metric(payload):
    return MetricIdentity.from_api(payload)


class TestOutputPath:
    def test_uses_first_dimension(self, metric_payload):
        metric = _metric(
            metric_payload("AWS/EC2", "CPUUtilization", [("InstanceId", "i-1")])
        )
        assert output_path(Path("/data"), metric) == Path(
            "/data/AWS/EC2/InstanceId/i-1"
        )

    def test_without_dimensions_uses_metric_name(self, metric_payload):
        metric = _metric(metric_payload("AWS/Billing", "EstimatedCharges"))
        assert output_path(Path("/data"), metric) == Path(
            "/data/AWS/Billing/EstimatedCharges"
        )

    def test_second_dimension_does_not_change_path(self, metric_payload):
        a = _metric(
            metric_payload("AWS/ELB", "Latency", [("LoadBalancerName", "web"), ("AZ", "a")])
        )
        b = _metric(
            metric_payload(
                "AWS/ELB", "RequestCount", [("LoadBalancerName", "web"), ("AZ", "b")]
            )
        )
        assert output_path(Path("/data"), a) == output_path(Path("/data"), b)

    def test_is_deterministic(self, metric_payload):
        payload = metric_payload("AWS/EBS", "VolumeIdleTime", [("VolumeId", "vol-9")])
        first = output_path(Path("base"), MetricIdentity.from_api(payload))
        second = output_path(Path("base"), MetricIdentity.from_api(dict(payload)))
        assert first == second == Path("base/AWS/EBS/VolumeId/vol-9")

    def test_leading_slash_value_nests_under_base_dir(self, metric_payload):
        metric = _metric(
            metric_payload("AWS/Logs", "IncomingBytes", [("LogGroupName", "/aws/lambda/fn")])
        )
        assert output_path(Path("/tmp/cloudwatch"), metric) == Path(
            "/tmp/cloudwatch/AWS/Logs/LogGroupName/aws/lambda/fn"
        )

    def test_root_value_gets_placeholder_file(self, metric_payload):
        metric = _metric(metric_payload("CWAgent", "disk_used_percent", [("path", "/")]))
        assert output_path(Path("/tmp/cloudwatch"), metric) == Path(
            "/tmp/cloudwatch/CWAgent/path/_"
        )

    def test_parent_segments_cannot_escape_base_dir(self, tmp_path, metric_payload):
        base = tmp_path / "cloudwatch"
        metric = _metric(
            metric_payload("Custom/App", "Requests", [("Route", "../../../etc/passwd")])
        )

        path = output_path(base, metric)

        assert path == base / "Custom/App/Route/_/_/_/etc/passwd"
        assert path.resolve().is_relative_to(base.resolve())

    def test_slash_in_metric_name_nests_under_base_dir(self, metric_payload):
        metric = _metric(metric_payload("Custom", "/requests/..//count"))
        assert output_path(Path("/data"), metric) == Path("/data/Custom/requests/_/count")


class TestAppendResult:
    def test_appends_serialized_document_byte_for_byte(
        self, tmp_path, metric_payload, datapoints
    ):
        metric = _metric(metric_payload("AWS/EC2", "CPU", [("InstanceId", "i-1")]))
        result = StatisticResult.from_api(
            metric, {"Label": "CPU", "Datapoints": datapoints(3)}
        )
        path = output_path(tmp_path, metric)

        written = append_result(path, metric, result)

        assert path.read_bytes() == result.to_json()
        assert written == len(result.to_json())

    def test_second_append_keeps_previous_bytes(
        self, tmp_path, metric_payload, datapoints
    ):
        metric = _metric(metric_payload("AWS/EC2", "CPU"))
        first = StatisticResult.from_api(metric, {"Datapoints": datapoints(1)})
        second = StatisticResult.from_api(metric, {"Datapoints": datapoints(2)})
        path = output_path(tmp_path, metric)

        append_result(path, metric, first)
        append_result(path, metric, second)

        assert path.read_bytes() == first.to_json() + second.to_json()
        docs = list(iter_documents(path))
        assert [len(d["Datapoints"]) for d in docs] == [1, 2]

    def test_existing_directories_are_reused(self, tmp_path, metric_payload, datapoints):
        metric = _metric(metric_payload("AWS/EC2", "CPU", [("InstanceId", "i-1")]))
        path = output_path(tmp_path, metric)
        path.parent.mkdir(parents=True)
        result = StatisticResult.from_api(metric, {"Datapoints": datapoints(1)})

        append_result(path, metric, result)

        assert path.is_file()

    def test_directory_failure_raises_persist_error(
        self, tmp_path, metric_payload, datapoints
    ):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")
        metric = _metric(metric_payload("AWS/EC2", "CPU"))
        result = StatisticResult.from_api(metric, {"Datapoints": datapoints(1)})

        with pytest.raises(PersistError) as excinfo:
            append_result(output_path(blocker, metric), metric, result)

        assert excinfo.value.metric == metric
        assert isinstance(excinfo.value.cause, OSError)

    def test_leading_slash_value_is_written_inside_base_dir(
        self, tmp_path, metric_payload, datapoints
    ):
        base = tmp_path / "cloudwatch"
        metric = _metric(
            metric_payload("AWS/Logs", "IncomingBytes", [("LogGroupName", "/aws/lambda/fn")])
        )
        result = StatisticResult.from_api(metric, {"Datapoints": datapoints(1)})

        append_result(output_path(base, metric), metric, result)

        target = base / "AWS/Logs/LogGroupName/aws/lambda/fn"
        assert [d["Dimensions"][0]["Value"] for d in iter_documents(target)] == [
            "/aws/lambda/fn"
        ]


class TestIterDocuments:
    def test_reads_concatenated_documents(self, tmp_path):
        path = tmp_path / "multi"
        path.write_text('{"a": 1}{"b": [1, 2]}\n{"c": {"d": null}}')

        assert list(iter_documents(path)) == [{"a": 1}, {"b": [1, 2]}, {"c": {"d": None}}]

    def test_empty_file_yields_nothing(self, tmp_path):
        path = tmp_path / "empty"
        path.write_text("")

        assert list(iter_documents(path)) == []
