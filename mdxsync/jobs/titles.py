"""Derive human-readable page titles from repository file slugs."""

from __future__ import annotations

import re

# Words that commonly appear glued together in directory and file names
# (e.g. "validatormanager", "subnetevm"). Matched greedily from the end.
VOCABULARY: frozenset[str] = frozenset({
    "account", "accounts", "address", "allowlist", "api", "apis", "architecture",
    "avalanche", "avalanchego", "block", "blocks", "bridge", "build", "builder",
    "chain", "chains", "cli", "client", "config", "configuration", "consensus",
    "contract", "contracts", "core", "cross", "data", "deploy", "deployment",
    "deployer", "design", "docs", "evm", "example", "examples", "fee", "fees",
    "gas", "genesis", "getting", "guide", "icm", "ictt", "index", "indexer",
    "interchain", "key", "keys", "l1", "manager", "message", "messenger",
    "messaging", "metrics", "migration", "minter", "native", "network", "node",
    "nodes", "overview", "precompile", "precompiles", "primary", "proposal",
    "quick", "registry", "relayer", "reward", "rewards", "rpc", "sdk", "server",
    "service", "setup", "signature", "staking", "start", "started", "subnet",
    "subnets", "teleporter", "token", "tokens", "tool", "tools", "transfer",
    "transaction", "transactions", "upgrade", "upgrades", "validator",
    "validators", "vm", "wallet", "warp",
})

# Title-cased tokens whose canonical spelling is not plain title case.
ACRONYMS: dict[str, str] = {
    "Abi": "ABI",
    "Acp": "ACP",
    "Acps": "ACPs",
    "Api": "API",
    "Apis": "APIs",
    "Avalanchego": "AvalancheGo",
    "Bls": "BLS",
    "Cli": "CLI",
    "Erc20": "ERC-20",
    "Erc721": "ERC-721",
    "Evm": "EVM",
    "Faq": "FAQ",
    "Http": "HTTP",
    "Icm": "ICM",
    "Ictt": "ICTT",
    "Id": "ID",
    "Json": "JSON",
    "Nft": "NFT",
    "Poa": "PoA",
    "Pos": "PoS",
    "Rpc": "RPC",
    "Sdk": "SDK",
    "Sdks": "SDKs",
    "Url": "URL",
    "Vm": "VM",
}

_SEPARATOR_RE = re.compile(r"[-_\s.]+")


def segment_token(token: str, vocabulary: frozenset[str] = VOCABULARY) -> list[str]:
    """Split a concatenated lowercase token into vocabulary words.

    Walks from the end of the token, each time taking the longest vocabulary
    word that is a suffix of what remains. When no word matches, the whole
    remainder is kept as one part.
    """
    word = token.lower()
    longest = max((len(v) for v in vocabulary), default=0)
    parts: list[str] = []
    end = len(word)
    while end > 0:
        match = None
        for size in range(min(longest, end), 0, -1):
            if word[end - size:end] in vocabulary:
                match = word[end - size:end]
                break
        if match is None:
            parts.insert(0, word[:end])
            break
        parts.insert(0, match)
        end -= len(match)
    return parts


def slug_to_title(slug: str) -> str:
    """validatormanager-contracts -> Validator Manager Contracts"""
    tokens = [t for t in _SEPARATOR_RE.split(slug) if t]
    words: list[str] = []
    for token in tokens:
        if token.isdigit():
            words.append(token)
            continue
        for part in segment_token(token):
            titled = part[:1].upper() + part[1:]
            words.append(ACRONYMS.get(titled, titled))
    return " ".join(words)


def title_for_path(path: str) -> str:
    """Title for a repository file path; README files use their directory name."""
    segments = [s for s in path.split("/") if s]
    if not segments:
        return ""
    name = segments[-1]
    stem = name.rsplit(".", 1)[0] if "." in name else name
    if stem.lower() == "readme" and len(segments) > 1:
        stem = segments[-2]
    return slug_to_title(stem)
