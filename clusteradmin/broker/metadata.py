"""
Broker descriptors as registered in the coordination store.

A broker writes its own registration at startup; the admin core only
reads it to resolve broker ids to network endpoints.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from clusteradmin.errors import BrokerEndPointNotAvailableError, ProtocolError


class SecurityProtocol(str, Enum):
    """Security protocols a broker listener can speak."""

    PLAINTEXT = "PLAINTEXT"
    SSL = "SSL"
    SASL_PLAINTEXT = "SASL_PLAINTEXT"
    SASL_SSL = "SASL_SSL"


@dataclass(frozen=True)
class EndPoint:
    """
    A broker listener.

    Attributes:
        host: Listener hostname
        port: Listener port
        protocol: Security protocol of the listener
    """
    host: str
    port: int
    protocol: SecurityProtocol

    def connection_string(self) -> str:
        return f"{self.protocol.value}://{self.host}:{self.port}"

    @staticmethod
    def from_connection_string(value: str) -> "EndPoint":
        """
        Parse ``PROTOCOL://host:port``.

        Raises:
            ProtocolError: If the string is not a valid endpoint
        """
        try:
            protocol, address = value.split("://", 1)
            host, port = address.rsplit(":", 1)
            return EndPoint(host=host, port=int(port), protocol=SecurityProtocol(protocol))
        except (AttributeError, TypeError, ValueError) as e:
            raise ProtocolError(f"Unable to parse endpoint: {value!r}") from e


@dataclass(frozen=True)
class BrokerEndPoint:
    """Broker id plus the single endpoint reported to clients."""
    broker_id: int
    host: str
    port: int

    def connection_string(self) -> str:
        return f"{self.host}:{self.port}"


@dataclass
class BrokerDescriptor:
    """
    Metadata about a broker in the cluster.

    Attributes:
        broker_id: Unique broker identifier
        endpoints: Listener endpoints keyed by security protocol
        rack: Optional rack ID
    """
    broker_id: int
    endpoints: Dict[SecurityProtocol, EndPoint] = field(default_factory=dict)
    rack: Optional[str] = None

    def get_broker_endpoint(self, protocol: SecurityProtocol) -> BrokerEndPoint:
        """
        Get the endpoint clients should use for a protocol.

        Raises:
            BrokerEndPointNotAvailableError: If the broker has no such listener
        """
        endpoint = self.endpoints.get(SecurityProtocol(protocol))
        if endpoint is None:
            raise BrokerEndPointNotAvailableError(
                f"End point with security protocol {SecurityProtocol(protocol).value} "
                f"not found for broker {self.broker_id}"
            )
        return BrokerEndPoint(self.broker_id, endpoint.host, endpoint.port)

    def to_json(self) -> str:
        """Encode as a version 2 registration record."""
        plaintext = self.endpoints.get(SecurityProtocol.PLAINTEXT)
        data = {
            "version": 2,
            "host": plaintext.host if plaintext else None,
            "port": plaintext.port if plaintext else -1,
            "endpoints": [ep.connection_string() for ep in self.endpoints.values()],
        }
        if self.rack is not None:
            data["rack"] = self.rack
        return json.dumps(data, sort_keys=True)

    @classmethod
    def from_json(cls, broker_id: int, raw: str) -> "BrokerDescriptor":
        """
        Decode a broker registration record.

        Version 1 records only carry host and port, which imply a
        PLAINTEXT listener. Later versions list every listener.

        Raises:
            ProtocolError: If the record cannot be decoded
        """
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise ProtocolError(f"Malformed registration for broker {broker_id}") from e

        if not isinstance(data, dict):
            raise ProtocolError(f"Unexpected registration for broker {broker_id}: {raw!r}")

        version = data.get("version")
        if type(version) is int and version == 1:
            try:
                plaintext = EndPoint(data["host"], int(data["port"]), SecurityProtocol.PLAINTEXT)
            except (KeyError, TypeError, ValueError) as e:
                raise ProtocolError(f"Incomplete registration for broker {broker_id}") from e
            endpoints = {SecurityProtocol.PLAINTEXT: plaintext}
        elif type(version) is int and version > 1:
            listeners = data.get("endpoints", [])
            if not isinstance(listeners, list):
                raise ProtocolError(f"Invalid endpoints in registration for broker {broker_id}")
            parsed = [EndPoint.from_connection_string(s) for s in listeners]
            endpoints = {ep.protocol: ep for ep in parsed}
        else:
            raise ProtocolError(
                f"Unknown registration version {version!r} for broker {broker_id}"
            )

        return cls(broker_id=broker_id, endpoints=endpoints, rack=data.get("rack"))
