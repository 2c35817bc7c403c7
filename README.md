# tilesmith

tilesmith reads, checks and writes the files behind a 2D map editor. A map holds
three kinds of layer:

- **tile layers**: tiles at integer positions, picked from a tileset;
- **thing layers**: logic objects with a position, a size, a colour and typed
  properties;
- **poly layers**: polygons with a winding rule and typed properties.

A *blueprint* (session) file says which tilesets, thing sets, poly sets, grid
settings and default layers an editing session uses. Maps are stored as JSON.

The package has no dependencies outside the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install .[test]
pytest
```

## Blueprint files

A blueprint is a plain-text file of `begin...`/`end...` blocks holding
`name value` lines. Blank lines and lines starting with `#` are skipped. Files
that a block refers to are resolved relative to the blueprint file's directory.

```
beginmapproperties
file map_properties.txt
endmapproperties

begintileset
id 1
name terrain
file tiles.txt
image tiles.png
endtileset

beginobjectset
id 1
name actors
file things.txt
endobjectset

beginpolyset
id 1
name collision
file polys.txt
endpolyset

beginsession
thingcenter bottomleft
bgcolor 32 32 32 0
endsession

begingridsettings
id 1
name default
gridsize 16
gridcolor 0 0 0 255
endgridsettings

begindefaultlayer
name ground
type tile
setid 1
gridid 1
alpha 255
enddefaultlayer
```

If no `begingridsettings` block is given, a default grid with id 1 is added.
Every default layer must refer to an existing grid and set, and its alpha must
lie between 0 and 255.

The package does not read tileset sprite tables itself. To use `begintileset`
blocks, give `BlueprintParser` a `sprite_table_loader`: a function that takes
the path of the table file and returns a mapping of tile id to sprite data.
Without one, a tileset block raises `ParseError`.

```python
from tilesmith.blueprint import BlueprintParser

def load_sprites(path):
    return {1: "grass", 2: "water"}

parser = BlueprintParser(sprite_table_loader=load_sprites)
blueprint = parser.parse_file("session/blueprint.txt")
print(sorted(blueprint.thingsets))
print(blueprint.gridsets[1].size)
```

`parse_string(contents, file_dir)` does the same for text already in memory.
A missing blueprint file raises `FileNotFoundError`; any other problem raises
`tilesmith.parsing.ParseError` with the line number and file name in its
message.

## Thing, poly and property definitions

Thing sets and poly sets are read with `ThingParser` and `PolyParser` from
`tilesmith.parsing`; both return a dict of definitions keyed by id.

```
beginobject
id 1
name door
w 16
h 32
color 255 0 0 255
beginproperty
name width
type int
default 16
comment door width
linkedto w
endproperty
endobject
```

Poly files use `beginpoly`/`endpoly` and the keys `id`, `name` and `color`.
Every key is required and may appear only once.

Property blocks are read by `PropertyParser`. Each has `name`, `type` (`int`,
`double` or `string`), `default` and `comment`; outside map mode it also needs
`linkedto`. Only integer properties can be linked: to a thing's width or height
(`w`, `h`) or to a colour component (`colorred`, `colorgreen`, `colorblue`,
`coloralpha`), or to `nothing`. Polygon properties may not link to width or
height. `PropertyParser(True).read_file(path)` reads a file of map properties,
which cannot be linked.

Colours are four integers, red green blue alpha:

```python
from tilesmith.parsing import parse_color

parse_color("255 128 0 255")   # Color(r=255, g=128, b=0, a=255)
```

## Maps

`MapParser` reads a JSON map. Unlike the blueprint parser it does its best with
broken input: it skips what it cannot understand and collects a message for
each problem in `errors`. The document's version string ends up in `version`.

```python
from tilesmith.map_parser import MapParser

parser = MapParser()
game_map = parser.parse_file("level1.json")
for problem in parser.errors:
    print(problem)
```

`MapLoader` wraps the parser. It fills in properties that the blueprints define
but the map lacks, applies linked properties (size and colour) to things and
polygons, and replaces tile types the tileset does not know with its lowest id.
Its messages go to a `MessageManager`:

```python
from tilesmith.loader import MapLoader
from tilesmith.messages import MessageManager

messages = MessageManager(30)
loader = MapLoader(
    messages,
    blueprint.tilesets,
    blueprint.thingsets,
    blueprint.polysets,
    blueprint.properties,
)
game_map = loader.load_from_file("level1.json")
print(messages.get())
```

`MapSaver` sorts the items of each layer, larger y first and then by x (for
polygons, by the mean of their vertices), and writes the map through
`MapSerializer`. `save` returns `False` if the file could not be written.

```python
from tilesmith.saver import MapSaver

MapSaver().save(game_map, "level1.json")
```

## Building maps in code

The data types live in `tilesmith.model`:

```python
from tilesmith.model import Map, Tile, TileLayer
from tilesmith.serializer import MapSerializer

layer = TileLayer(set=1, gridset=1, alpha=255, id="ground")
layer.data.append(Tile(x=0, y=0, type=3))

game_map = Map()
game_map.layers.append(layer)
game_map.properties.int_properties["music"] = 2

print(MapSerializer().to_string(game_map, "1.1.10"))
```

The serializer writes compact JSON with `meta`, `attributes` and `layers`
nodes; attributes are written as integers, then doubles, then strings, each
group sorted by name.

Layers accept a `LayerVisitor`, whose `visit_tile_layer`, `visit_thing_layer`
and `visit_poly_layer` methods are called by the layer's kind.

## Other helpers

- `tilesmith.messages.MessageManager`: a queue of status messages that expire
  after a given age (advanced with `tick`), with subscribers told when
  messages are added, expire or are cleared.
- `tilesmith.env.Env`: builds paths to the application data, assets and the
  per-user `.tile_editor` directory. `ScreenTitler` passes a title on to any
  object with a `set_title` method.
- `tilesmith.exchange.ExchangeData`: a hand-off area between editor screens,
  with one mark per screen `State`.
- `tilesmith.inflator`: `inflate_thing` and `inflate_poly` apply a definition's
  size, colour and linked properties to an entity.

## What the package does not do

tilesmith handles the files and data of a map editor only. It has no editing
window, no drawing of maps, no input handling and no command to start an
editor. It does not read tileset sprite tables or images; those come from the
`sprite_table_loader` you supply.