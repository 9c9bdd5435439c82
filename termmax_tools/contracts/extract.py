# termmax_tools/contracts/extract.py

import json
from pathlib import Path
from typing import Iterable, List

from ..core.logging import ToolsLogger, log_with_context, INFO, ERROR


logger = ToolsLogger.get_logger('contracts.extract')


def extract_abis(artifact_paths: Iterable[Path], out_dir: Path) -> List[Path]:
    """
    Write the `abi` array of each build artifact to `<out_dir>/<ContractName>.json`.

    The contract name is the artifact file stem (`out/Faucet.sol/Faucet.json` -> `Faucet`).
    Unreadable artifacts are logged and skipped.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written = []

    for artifact_path in artifact_paths:
        artifact_path = Path(artifact_path)
        try:
            with open(artifact_path, 'r') as f:
                artifact = json.load(f)
            abi = artifact["abi"] if isinstance(artifact, dict) else None
            if not isinstance(abi, list):
                raise ValueError("artifact has no 'abi' list")
        except (OSError, ValueError, KeyError) as e:
            log_with_context(logger, ERROR, "Failed to read build artifact",
                             artifact=str(artifact_path), error=str(e))
            continue

        output_path = out_dir / f"{artifact_path.stem}.json"
        with open(output_path, 'w') as f:
            json.dump(abi, f, indent=2)
            f.write("\n")

        log_with_context(logger, INFO, "ABI extracted",
                         artifact=str(artifact_path), output=str(output_path), entries=len(abi))
        written.append(output_path)

    return written
