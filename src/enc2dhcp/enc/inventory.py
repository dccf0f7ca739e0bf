"""Host inventory built from a directory of ENC records."""
import logging
from pathlib import Path
from typing import Any, Optional, Union

from ..config.settings import Settings
from ..dhcp.diff import diff_hosts
from ..dhcp.parser import HostsFileCache, HostsFileParser
from ..dhcp.schema import DiffResult, Ensure, HostRecord, PxeRecord
from ..dhcp.writer import HostsFileWriter
from ..utils.logging_config import timed
from .classifier import ClassifierLookup
from .loader import EncLoader, is_enc_file
from .pxe import PxeDeriver

logger = logging.getLogger(__name__)


@timed("enumerate")
def enumerate_instances(
    directory: Union[str, Path],
    loader: Optional[EncLoader] = None,
    deriver: Optional[PxeDeriver] = None,
) -> list[HostRecord]:
    """
    Derive host records for every ENC file in a directory.

    Files are visited in name order. Each host contributes its primary
    record followed by its secondary interfaces; hosts without a valid
    hostname or without a renderable primary stanza contribute nothing.
    """
    loader = loader or EncLoader()
    deriver = deriver or PxeDeriver()
    directory = Path(directory)

    if not directory.is_dir():
        logger.debug(f"ENC directory {directory} does not exist")
        return []

    instances: list[HostRecord] = []
    for file_path in sorted(directory.iterdir()):
        if not is_enc_file(file_path):
            continue

        enc = loader.load(file_path)
        if not enc:
            continue

        pxe = deriver.derive(enc)
        records = pxe.host_records()
        if not records:
            logger.debug(f"{file_path.name}: no PXE stanza")
            continue

        instances.extend(records)

    logger.info(f"Enumerated {len(instances)} host record(s) from {directory}")
    return instances


class HostInventory:
    """Managed host declarations for one ENC directory and hosts file.

    Usage:
        inventory = HostInventory.from_settings(Settings.load())
        diff = inventory.diff()
        inventory.sync()
    """

    def __init__(
        self,
        enc_dir: Union[str, Path],
        hosts_file: Union[str, Path],
        classifier: Optional[ClassifierLookup] = None,
        cache: Optional[HostsFileCache] = None,
    ):
        self.enc_dir = Path(enc_dir)
        self.hosts_file = Path(hosts_file)
        self.classifier = classifier or ClassifierLookup()
        self.cache = cache if cache is not None else HostsFileCache()
        self.loader = EncLoader()
        self.deriver = PxeDeriver()
        self.parser = HostsFileParser(self.cache)
        self.writer = HostsFileWriter(self.cache)

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        cache: Optional[HostsFileCache] = None,
    ) -> "HostInventory":
        classifier = ClassifierLookup(
            settings.external_nodes,
            timeout=settings.classifier_timeout,
        )
        return cls(settings.enc_dir, settings.hosts_file, classifier, cache)

    def instances(self) -> list[HostRecord]:
        """All managed host records."""
        return enumerate_instances(self.enc_dir, self.loader, self.deriver)

    def enc_for(self, hostname: str) -> dict[str, Any]:
        """ENC record for a host, {"hostname": hostname} if it has none."""
        return self.loader.find(hostname.lower(), self.enc_dir)

    def pxe_for(self, hostname: str) -> PxeRecord:
        return self.deriver.derive(self.enc_for(hostname))

    def existing(self, hostname: str) -> Optional[HostRecord]:
        """The host's current declaration in the hosts file, if any."""
        return self.parser.find(self.hosts_file, hostname)

    def classify(self, hostname: str) -> dict[str, Any]:
        """Ask the external classifier about a host."""
        return self.classifier.lookup(hostname)

    def classify_pxe(self, hostname: str) -> PxeRecord:
        """Derive a PXE record from classifier output."""
        enc = self.classify(hostname)
        if enc and "hostname" not in enc:
            enc["hostname"] = hostname
        return self.deriver.derive(enc)

    def diff(self, purge: bool = False) -> DiffResult:
        """Compare managed records with the hosts file."""
        current = self.parser.parse(self.hosts_file)
        return diff_hosts(self.instances(), current, purge=purge)

    def sync(self, purge: bool = False, dry_run: bool = False) -> tuple[DiffResult, str]:
        """
        Bring the hosts file in line with the ENC directory.

        Returns:
            Tuple of (applied diff, resulting hosts file text)
        """
        diff = self.diff(purge=purge)
        text = self.writer.apply(self.hosts_file, diff, dry_run=dry_run)
        return diff, text

    def ensure_absent(self, hostname: str, dry_run: bool = False) -> tuple[DiffResult, str]:
        """Remove a host's declaration from the hosts file."""
        current = self.parser.parse(self.hosts_file)
        existing = self.existing(hostname)
        desired = []
        if existing is not None:
            desired.append(
                HostRecord(
                    name=existing.name,
                    hostname=existing.hostname,
                    ensure=Ensure.ABSENT,
                )
            )
        diff = diff_hosts(desired, current)
        text = self.writer.apply(self.hosts_file, diff, dry_run=dry_run)
        return diff, text
