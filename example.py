"""Example usage of the tablegen library."""

import json

from tablegen import CompilerConfig, TableCompiler

# Annotated struct definitions
source = """
#[derive(Drop, Serde)]
struct Player {
    #[key]
    id: felt252,
    #[name("Display Name")]
    name: ByteArray,
    #[raw]
    level: u8,
    #[index]
    guild: felt252,
}

struct Score {
    #[key]
    player: felt252,
    #[key]
    #[id('round')]
    round: u32,
    points: u64,
}

struct Broken {
    a: felt252,
    #[key]
    b: felt252,
}
"""

compiler = TableCompiler(CompilerConfig(interface_path="introspect::table"))
result = compiler.compile(source)

print("Compiled tables:")
for table in result.tables:
    structure = table.structure
    print(f"  {table.name}: {type(structure.key).__name__}, {len(structure.columns)} column(s)")

print("\nErrors:")
for error in result.errors:
    print(f"  {error}")

print("\n" + "=" * 60)
print(result.tables[0].code)

print("=" * 60)
print(json.dumps(result.tables[1].structure.to_dict(), indent=2))
