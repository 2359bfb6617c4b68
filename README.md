# niitools

A small collection of tools:

- **Parental control master keys** (`niitools.masterkey`): the v0 master key
  algorithm for the Wii, DSi, 3DS and Wii U, and the HMAC-SHA256 step shared by
  later algorithms.
- **V1 ticket extension** (`niitools.ticket_v1`): read and write the V1 extension
  block that can follow a pre-Switch ticket, with helpers for big-endian binary
  streams in `niitools.binio`.
- **Monorepo helper** (the `forja` command): list TODO files and inline TODO
  comments, run checks and fixes, and regenerate machine-made files.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Master keys

```python
from niitools.masterkey import Platform, calculate_v0_master_key

key = calculate_v0_master_key(Platform.WII, 84293062, 5, 8)
print(f"{key:05d}")  # 66150; always show five digits
```

`calculate_v0_master_key(platform, inquiry_number, day, month)` accepts an inquiry
number of at most 8 digits, a day from 1 to 31 and a month from 1 to 12, and raises
`ValueError` otherwise. `Platform.SWITCH` is rejected with `ValueError`, as the v0
algorithm does not exist there. The Wii and DSi give the same result, as do the 3DS
and Wii U.

`calculate_hmac_master_key(hmac_key, inquiry_number, day, month, big_endian)` takes a
32-byte HMAC key that you supply, hashes `MMDD` followed by the inquiry number padded
to 10 digits, reads the first four bytes of the digest in the chosen byte order and
returns the value modulo 100000.

## The V1 ticket extension

`TicketV1` holds a list of `TicketV1Section` objects and a `flags` value. Every
section has a `SectionKind` and records of the matching type: `PermanentRecord`,
`SubscriptionRecord`, `ContentRecord`, `ContentConsumptionRecord` or
`AccessTitleRecord` (the first two carry a `ReferenceId`).

```python
import io
from niitools.ticket_v1 import (
    ContentConsumptionRecord, SectionKind, TicketV1, TicketV1Section,
)

extension = TicketV1(
    sections=[
        TicketV1Section(
            SectionKind.CONTENT_CONSUMPTION,
            [ContentConsumptionRecord(content_index=0, limit_code=1, limit_value=10)],
        )
    ],
)

buffer = io.BytesIO()
extension.dump(buffer)
assert len(buffer.getvalue()) == extension.size()

buffer.seek(0)
assert TicketV1.read(buffer) == extension
```

`TicketV1.read` starts at the current stream position and raises `TicketV1Error` on
an unknown version, header size, section header size, section kind, total size, or a
stream that ends too early.

`niitools.binio` offers `read_exact`, `read_u8`, `read_u16`, `read_u32`, `read_u64`,
`read_padded_string`, `write_padded`, `align_to_boundary`, `skip_to_alignment` and
`pad_to_alignment`, all big-endian.

## The `forja` command

Run it anywhere inside a repository whose root holds a `forja-root-beacon.txt` file
(found by walking up from the current directory):

```
forja todo    # print TODO.md files and inline TODO comments
forja check   # nix flake check, piped through nom
forja fix     # run formatters and fixers, then regenerate files
forja gen     # nix run .#generateFiles
```

Inline entries are comment blocks (`//` in `.rs` and `.json5` files, `#` in `.nix`,
`.toml` and `.yaml` files) whose first line starts with `TODO: ` or
`TODO(TAG, ...): `. Known tags are `FIX`, `IMPROVE` and `ROADBLOCK`; others are shown
as unknown. URLs in the block are listed as resources, and GitHub issue links also
show whether the issue is open or closed, asked of the GitHub API. Output goes
through the `logging` module with ANSI colours.

`todo`, `check`, `fix` and `gen` call external programs (`glow`, `nix`, `nom`,
`alejandra`, `taplo`, `cargo`, `addlicense`), which must be installed. The command
exits with status 1 when a program fails or the repository root cannot be found.

## What is not included

- Master key algorithms beyond v0: no platform keys are shipped, so v1, v2 and v3
  keys can only be computed by passing your own key to `calculate_hmac_master_key`
  where that scheme applies.
- Whole tickets, certificate chains and signed blob headers are not parsed; only the
  V1 extension block is handled, and title key decryption is not provided.