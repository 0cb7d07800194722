"""Tests for the Route 53 DNS store."""

from unittest.mock import patch, MagicMock
import pytest
from botocore.exceptions import ClientError

from fleetdns.aws.dns import Route53Store
from fleetdns.base.config import AWSConfig
from fleetdns.base.exceptions import ChangeRejectedError, DNSError, ZoneNotFoundError
from fleetdns.models import AddressRecord, Change


def _client_error(code: str, msg: str = "error") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": msg}}, "op")


def _pages(client, *pages):
    paginator = MagicMock()
    paginator.paginate.return_value = list(pages)
    client.get_paginator.return_value = paginator
    return paginator


@pytest.fixture
def svc():
    with patch("fleetdns.aws.factory.boto3") as mock_boto:
        mock_client = MagicMock()
        mock_boto.client.return_value = mock_client
        instance = Route53Store(AWSConfig(
            aws_access_key_id="key",
            aws_secret_access_key="secret",
            region_name="us-east-1",
        ))
        yield instance, mock_client


# --- client ---

class TestClient:
    def test_built_from_config(self):
        with patch("fleetdns.aws.factory.boto3") as mock_boto:
            Route53Store(AWSConfig(region_name="us-east-1"))
            assert mock_boto.client.call_args[0][0] == "route53"

    def test_injected_client(self):
        client = MagicMock()
        assert Route53Store(client=client).client is client


# --- list_private_zones ---

class TestListPrivateZones:
    def test_filters_public_zones(self, svc):
        inst, client = svc
        _pages(
            client,
            {"HostedZones": [
                {"Id": "/hostedzone/Z1", "Name": "corp.example.", "Config": {"PrivateZone": True}},
                {"Id": "/hostedzone/Z2", "Name": "example.com.", "Config": {"PrivateZone": False}},
            ]},
            {"HostedZones": [
                {"Id": "/hostedzone/Z3", "Name": "dev.example.", "Config": {"PrivateZone": True}},
            ]},
        )
        zones = inst.list_private_zones()
        assert [z["zone_id"] for z in zones] == ["Z1", "Z3"]
        client.get_paginator.assert_called_once_with("list_hosted_zones")

    def test_error(self, svc):
        inst, client = svc
        client.get_paginator.return_value.paginate.side_effect = _client_error("Throttling")
        with pytest.raises(DNSError):
            inst.list_private_zones()


# --- find_private_zone_for_network ---

class TestFindZone:
    def test_found(self, svc):
        inst, client = svc
        _pages(client, {"HostedZones": [
            {"Id": "/hostedzone/Z1", "Name": "a.", "Config": {"PrivateZone": True}},
            {"Id": "/hostedzone/Z2", "Name": "b.", "Config": {"PrivateZone": True}},
        ]})
        client.get_hosted_zone.side_effect = lambda Id: {
            "Z1": {"VPCs": [{"VPCId": "vpc-a"}]},
            "Z2": {"VPCs": [{"VPCId": "vpc-b"}, {"VPCId": "vpc-c"}]},
        }[Id]
        assert inst.find_private_zone_for_network("vpc-c") == "Z2"

    def test_not_associated(self, svc):
        inst, client = svc
        _pages(client, {"HostedZones": [
            {"Id": "/hostedzone/Z1", "Name": "a.", "Config": {"PrivateZone": True}},
        ]})
        client.get_hosted_zone.return_value = {"VPCs": [{"VPCId": "vpc-a"}]}
        assert inst.find_private_zone_for_network("vpc-z") is None

    def test_no_private_zones(self, svc):
        inst, client = svc
        _pages(client, {"HostedZones": []})
        assert inst.find_private_zone_for_network("vpc-a") is None
        client.get_hosted_zone.assert_not_called()

    def test_zone_vanished(self, svc):
        inst, client = svc
        client.get_hosted_zone.side_effect = _client_error("NoSuchHostedZone")
        with pytest.raises(ZoneNotFoundError):
            inst.get_zone_networks("Z-gone")


# --- list_records ---

class TestListRecords:
    def test_success(self, svc):
        inst, client = svc
        paginator = _pages(
            client,
            {"ResourceRecordSets": [
                {"Name": "corp.example.", "Type": "SOA", "TTL": 900,
                 "ResourceRecords": [{"Value": "ns-1. hostmaster. 1 7200 900 1209600 86400"}]},
                {"Name": "cmlue1dweb01a.corp.example.", "Type": "A", "TTL": 300,
                 "ResourceRecords": [{"Value": "10.0.0.1"}]},
            ]},
            {"ResourceRecordSets": [
                {"Name": "alias.corp.example.", "Type": "A",
                 "AliasTarget": {"DNSName": "lb.example."}},
            ]},
        )
        records = inst.list_records("Z1")
        paginator.paginate.assert_called_once_with(HostedZoneId="Z1")
        assert len(records) == 3
        assert records[1] == AddressRecord(
            "cmlue1dweb01a.corp.example.", ("10.0.0.1",), 300, "A", "Z1"
        )
        assert records[2].values == ()

    def test_not_found(self, svc):
        inst, client = svc
        client.get_paginator.return_value.paginate.side_effect = _client_error("NoSuchHostedZone")
        with pytest.raises(ZoneNotFoundError):
            inst.list_records("Z-missing")


# --- submit_change_batch ---

class TestSubmitChangeBatch:
    def test_success(self, svc):
        inst, client = svc
        client.change_resource_record_sets.return_value = {
            "ChangeInfo": {"Id": "/change/C123", "Status": "PENDING"}
        }
        existing = AddressRecord("cmlue1dweb02a.corp.example.", ("10.0.0.2",))
        change_id = inst.submit_change_batch("Z1", [
            Change.create("cmlue1dweb01a.corp.example.", "10.0.0.1"),
            Change.delete(existing),
        ])
        assert change_id == "C123"
        args = client.change_resource_record_sets.call_args[1]
        assert args["HostedZoneId"] == "Z1"
        changes = args["ChangeBatch"]["Changes"]
        assert [c["Action"] for c in changes] == ["CREATE", "DELETE"]
        assert changes[0]["ResourceRecordSet"] == {
            "Name": "cmlue1dweb01a.corp.example.",
            "Type": "A",
            "TTL": 300,
            "ResourceRecords": [{"Value": "10.0.0.1"}],
        }

    def test_upsert_keeps_name_and_ttl(self, svc):
        inst, client = svc
        client.change_resource_record_sets.return_value = {"ChangeInfo": {"Id": "/change/C1"}}
        existing = AddressRecord("cmlue1dweb01a.corp.example.", ("10.0.0.1",), ttl=60)
        inst.submit_change_batch("Z1", [Change.upsert(existing, "10.0.0.9")])
        rrs = client.change_resource_record_sets.call_args[1]["ChangeBatch"]["Changes"][0]["ResourceRecordSet"]
        assert rrs["TTL"] == 60
        assert rrs["ResourceRecords"] == [{"Value": "10.0.0.9"}]

    def test_rejected(self, svc):
        inst, client = svc
        client.change_resource_record_sets.side_effect = _client_error("InvalidChangeBatch")
        with pytest.raises(ChangeRejectedError):
            inst.submit_change_batch("Z1", [Change.create("x.corp.example.", "10.0.0.1")])

    def test_zone_not_found(self, svc):
        inst, client = svc
        client.change_resource_record_sets.side_effect = _client_error("NoSuchHostedZone")
        with pytest.raises(ZoneNotFoundError):
            inst.submit_change_batch("Z-bad", [Change.create("x.corp.example.", "10.0.0.1")])


# --- get_change_status ---

class TestGetChangeStatus:
    def test_insync(self, svc):
        inst, client = svc
        client.get_change.return_value = {"ChangeInfo": {"Id": "/change/C1", "Status": "INSYNC"}}
        assert inst.get_change_status("C1") is True
        client.get_change.assert_called_once_with(Id="C1")

    def test_pending(self, svc):
        inst, client = svc
        client.get_change.return_value = {"ChangeInfo": {"Id": "/change/C1", "Status": "PENDING"}}
        assert inst.get_change_status("C1") is False

    def test_error(self, svc):
        inst, client = svc
        client.get_change.side_effect = _client_error("NoSuchChange")
        with pytest.raises(DNSError):
            inst.get_change_status("C-missing")
