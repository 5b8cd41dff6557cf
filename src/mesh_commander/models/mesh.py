"""Versions reported by ``istioctl version -o json``."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ComponentVersion:
    component: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> ComponentVersion:
        info = d.get("Info") or d.get("info") or {}
        return cls(
            component=d.get("Component") or d.get("component", ""),
            version=info.get("version", ""),
        )


@dataclass
class ProxyVersion:
    proxy_id: str = ""
    version: str = ""

    @classmethod
    def from_dict(cls, d: dict) -> ProxyVersion:
        return cls(
            proxy_id=d.get("ID", ""),
            version=d.get("IstioVersion", ""),
        )


@dataclass
class MeshVersionReport:
    client_version: str = ""
    control_plane: list[ComponentVersion] | None = None
    data_plane: list[ProxyVersion] | None = None

    @property
    def control_plane_versions(self) -> list[str]:
        return [c.version for c in self.control_plane or []]

    @property
    def data_plane_versions(self) -> list[str]:
        return [p.version for p in self.data_plane or []]

    @classmethod
    def from_dict(cls, d: dict) -> MeshVersionReport:
        client = d.get("clientVersion") or {}
        mesh = d.get("meshVersion")
        proxies = d.get("dataPlaneVersion")
        return cls(
            client_version=client.get("version", ""),
            control_plane=[ComponentVersion.from_dict(c) for c in mesh] if mesh is not None else None,
            data_plane=[ProxyVersion.from_dict(p) for p in proxies] if proxies is not None else None,
        )
