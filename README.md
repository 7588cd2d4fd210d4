# fnkrt

The runtime pieces of a small hobby kernel as a Python package: a boot
sequence driven by a virtual file system and a telemetry stream, the `fnk`
socket library with its circular buffers and socket server, a first-fit heap
allocator over a byte arena, an ELF object reader, and `elftofnk`, a tool
that checks the sections of a small relocatable ELF object and writes the
`.fnk` descriptor for it.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

### `elftofnk`

```
elftofnk <inputelf> <outputfnk>
```

Parses the ELF object and matches its content sections against the known
slots `.ljd`, `.text`, `.pjd`, `.data`, `.rodata` and `.bss`. Only `.text`
is required. Unknown sections are discarded with a warning, and the
relocations of each matched section are recorded. The command then writes
the `.fnk` descriptor to the output file: the magic bytes
`FE ED 'F' 'N' 'K' 'Y'` followed by the output file's base name, cut and
zero-padded to 12 bytes.

Progress and problems are logged to standard output with `[INFO]`, `[WARN]`
and `[ERRR]` labels. On a wrong argument count, an unreadable or malformed
input, an output that cannot be created, or a missing `.text` section, the
command exits with status 1.

### `fnkrt-boot`

```
fnkrt-boot
```

Runs the boot sequence. It starts telemetry on standard output, initialises
the virtual file system and records the results in a `MemDump`. If an error
code turns up, its description is reported and the loader halts: `Bootloader.run`
raises `ErrorHang`, and the command exits with status 1.

## Modules

- `fnkrt.config`: `VERBOSE_LEVEL`, `NAMESIZE` (12) and
  `MAX_LIBFUNCTIONS` (32).
- `fnkrt.errc`: `FnkError`, an exception carrying an `errc` code, and
  `ErrorTable`, whose `describe` turns codes into messages. Codes below 1
  give `"Ok"` and unknown codes give `None`.
- `fnkrt.memops`: byte swapping (`bswap`, `bswap16`, `bswap32`,
  `bswap64`), power-of-two alignment (`alignp2`), `memcpy` and `memset` on
  byte buffers.
- `fnkrt.ops`: `ispowertwo`, `minimum`, `maximum` and `strlen`. `strlen`
  counts up to the first NUL.
- `fnkrt.dlinkedlist`: `DListNode`, a plain non-circular doubly linked list
  node with `append`, `remove` and iteration forward from a node.
- `fnkrt.circularbuffer`: `CircularBuffer`, a fixed-size byte ring buffer
  that keeps one byte in reserve. It provides `write`, `read`, `is_empty`,
  `is_full` and `used`. Writing or reading more than fits raises
  `BufferOverflowError`.
- `fnkrt.sockets`: `Socket`, a read buffer and a write buffer with five
  `MailboxStatus` mailboxes and an attached context. `write` returns the
  index of a free mailbox. Failures raise `SocketError`, and `errctostr`
  describes its codes.
- `fnkrt.sockserv`: `SocketServer`, a round-robin queue of bound sockets
  with `bind`, `remove` and `next_in_queue`. `read_write_buffer` and
  `write_read_buffer` give the server side of a socket. Failures raise
  `SockServError`.
- `fnkrt.jumptable`: `ProgramJumpDescriptor`, a named table of 32 function
  slots. `library_jump_descriptor()` returns the table the socket library
  exports.
- `fnkrt.alloc`: `Heap`, a first-fit allocator over a `bytearray` arena,
  with lazy coalescing (`malloc`, `calloc`, `realloc`, `free`, `fini`).
  Pointers are integer offsets into `Heap.memory`. Running out of arena
  raises `MemoryError`.
- `fnkrt.log`: `Logger` and `LogLevel`, printf-style logging with level
  labels.
- `fnkrt.telemetry`: `Telemetry`, the boot output stream. It provides
  `puts`, `putc` and `printf`, plus `info`, `warn` and `error`, which are
  tagged with the caller's file and line and filtered by verbosity.
- `fnkrt.vfs`: `Vfs`, `Directory` and `VfsFile` over the host file system.
  Directories yield their regular files one by one. Failures raise
  `VfsError`, and `errctostr` describes its codes.
- `fnkrt.boot`: `Bootloader`, `MemDump` (with `pack`/`unpack` to three
  little-endian 32-bit fields) and `ErrorHang`.
- `fnkrt.elf`: `parse` reads a 32- or 64-bit ELF file of either byte order
  into an `ElfFile`, with its `Section`s, symbols and relocations.
  Malformed input raises `ElfFormatError`.
- `fnkrt.elftofnk`: `map_sections`, `build_header` and `convert`, the steps
  behind the `elftofnk` command. `symtab_errctostr` and `loadf_errctostr`
  describe the converter's error codes.

## What it does not do

- The boot sequence stops after the file system is up. It loads and starts no
  libraries or programs.
- `elftofnk` writes only the descriptor: the magic bytes and the name. It
  reads and checks the sections and their relocations. It writes no section
  contents and no relocation table into the `.fnk` file.