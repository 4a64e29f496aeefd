import sys

from psetview.collector import collect
from psetview.dxf import read


def main() -> None:
    drawing = read(sys.argv[1])
    for entity in drawing.modelspace_entities():
        result = collect(entity)
        if not result.found:
            continue
        print(f"--- {entity.handle} {entity.type_name}")
        for line in result.lines():
            print(line)


if __name__ == "__main__":
    main()
