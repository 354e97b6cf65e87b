"""
Artifact Store
Locates compiled contract artifacts (Hardhat layout) and links libraries
"""

import os
import json
from typing import Dict, List, Optional
from web3 import Web3
from loguru import logger

from .exceptions import (
    ArtifactNotFoundError,
    AmbiguousArtifactError,
    InvalidArtifactError,
    MissingLibraryError
)


class ContractArtifact:
    """
    Compiled representation of a single contract
    """

    def __init__(
        self,
        contract_name: str,
        source_name: str,
        abi: List[Dict],
        bytecode: str,
        link_references: Optional[Dict] = None
    ):
        self.contract_name = contract_name
        self.source_name = source_name
        self.abi = abi
        self.bytecode = bytecode
        self.link_references = link_references or {}

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.source_name}:{self.contract_name}"

    @property
    def is_deployable(self) -> bool:
        """Abstract contracts and interfaces compile to empty bytecode"""
        return self.bytecode not in ('', '0x')

    @property
    def needs_linking(self) -> bool:
        return any(self.link_references.values())

    def ensure_deployable(self):
        if not self.is_deployable:
            raise InvalidArtifactError(
                f"Contract {self.fully_qualified_name} is abstract or an interface "
                f"and can't be deployed"
            )

    @classmethod
    def from_json(cls, data: Dict, path: str = '') -> 'ContractArtifact':
        """
        Build an artifact from parsed artifact JSON

        Args:
            data: Parsed JSON (Hardhat or Foundry layout)
            path: File the data came from, used in error messages

        Returns:
            ContractArtifact
        """
        if 'abi' not in data or 'bytecode' not in data:
            raise InvalidArtifactError(f"Artifact {path} is missing 'abi' or 'bytecode'")

        bytecode = data['bytecode']
        link_references = data.get('linkReferences', {})

        # Foundry nests bytecode under "object"
        if isinstance(bytecode, dict):
            link_references = bytecode.get('linkReferences', link_references)
            bytecode = bytecode.get('object', '')

        if bytecode and not bytecode.startswith('0x'):
            bytecode = '0x' + bytecode

        contract_name = data.get('contractName') or os.path.splitext(os.path.basename(path))[0]
        source_name = data.get('sourceName') or os.path.basename(os.path.dirname(path))

        return cls(
            contract_name=contract_name,
            source_name=source_name,
            abi=data['abi'],
            bytecode=bytecode or '0x',
            link_references=link_references
        )


class ArtifactStore:
    """
    Resolves contract names to artifact files under an artifacts directory
    """

    def __init__(self, artifacts_dir: str = 'artifacts'):
        """
        Initialize Artifact Store

        Args:
            artifacts_dir: Root of the compiled artifacts tree
        """
        self.artifacts_dir = artifacts_dir

    def get_artifact(self, name: str) -> ContractArtifact:
        """
        Load the artifact for a contract

        Args:
            name: Contract name ("LoanStreamChain") or fully qualified
                name ("contracts/LoanStreamChain.sol:LoanStreamChain")

        Returns:
            ContractArtifact
        """
        if ':' in name:
            source_name, contract_name = name.rsplit(':', 1)
            path = os.path.join(self.artifacts_dir, source_name, f"{contract_name}.json")

            if not os.path.isfile(path):
                raise ArtifactNotFoundError(name, self.artifacts_dir)
        else:
            candidates = self._find_candidates(name)

            if not candidates:
                raise ArtifactNotFoundError(name, self.artifacts_dir)

            if len(candidates) > 1:
                raise AmbiguousArtifactError(
                    name,
                    [self._qualified_name(candidate, name) for candidate in candidates]
                )

            path = candidates[0]

        artifact = self._load(path)
        logger.debug(f"Loaded artifact {artifact.fully_qualified_name} from {path}")
        return artifact

    def list_contracts(self) -> List[str]:
        """Fully qualified names of every artifact in the store"""
        names = []

        for path in self._iter_artifact_files():
            contract_name = os.path.splitext(os.path.basename(path))[0]
            names.append(self._qualified_name(path, contract_name))

        return sorted(names)

    def _find_candidates(self, contract_name: str) -> List[str]:
        target = f"{contract_name}.json"
        return sorted(
            path for path in self._iter_artifact_files()
            if os.path.basename(path) == target
        )

    def _iter_artifact_files(self):
        if not os.path.isdir(self.artifacts_dir):
            return

        for root, dirs, files in os.walk(self.artifacts_dir):
            # Compiler inputs/outputs, not artifacts
            dirs[:] = [d for d in dirs if d != 'build-info']

            for filename in files:
                if filename.endswith('.json') and not filename.endswith('.dbg.json'):
                    yield os.path.join(root, filename)

    def _qualified_name(self, path: str, contract_name: str) -> str:
        source_dir = os.path.relpath(os.path.dirname(path), self.artifacts_dir)
        return f"{source_dir.replace(os.sep, '/')}:{contract_name}"

    def _load(self, path: str) -> ContractArtifact:
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise InvalidArtifactError(f"Cannot read artifact {path}: {e}") from e

        if not isinstance(data, dict):
            raise InvalidArtifactError(f"Artifact {path} is not a JSON object")

        return ContractArtifact.from_json(data, path)


def link_bytecode(artifact: ContractArtifact, libraries: Optional[Dict[str, str]] = None) -> str:
    """
    Splice library addresses into unlinked bytecode

    Args:
        artifact: Artifact whose bytecode has link references
        libraries: Library name (bare or "source.sol:Name") -> deployed address

    Returns:
        Linked bytecode as a 0x-prefixed hex string
    """
    libraries = dict(libraries or {})
    bytecode = artifact.bytecode
    used = set()

    for source_name, source_libraries in artifact.link_references.items():
        for library_name, references in source_libraries.items():
            fq_name = f"{source_name}:{library_name}"

            if fq_name in libraries:
                key = fq_name
            elif library_name in libraries:
                key = library_name
            else:
                raise MissingLibraryError(
                    f"Contract {artifact.contract_name} needs library {fq_name}, "
                    f"which was not provided"
                )

            address = libraries[key]
            if not Web3.is_address(address):
                raise ValueError(f"Invalid address for library {fq_name}: {address}")

            used.add(key)
            address_hex = address.lower().replace('0x', '')

            for reference in references:
                # Offsets are in bytes of the code, after the 0x prefix
                start = 2 + reference['start'] * 2
                end = start + reference['length'] * 2
                bytecode = bytecode[:start] + address_hex + bytecode[end:]

    unknown = set(libraries) - used
    if unknown:
        raise MissingLibraryError(
            f"Contract {artifact.contract_name} does not use libraries: "
            f"{', '.join(sorted(unknown))}"
        )

    return bytecode
