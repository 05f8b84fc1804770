from rich.pretty import pprint

from argparser import *

parser = ArgParser("serve", "Serve files from a directory", version="1.0.0", shell=True, colorful=True)
parser.add_option("p", "port", "listening port", 8080).validator(str.isdigit)
parser.add_option("b", "bind", "address to bind", "127.0.0.1")
parser.add_flag("v", "verbose", "verbose output")
parser.add_positional("root", "directory to serve", True)


if __name__ == '__main__':
    invoke(parser)
    pprint(list(parser.registry))
    pprint({
        "root": parser.get_string("root"),
        "bind": parser.get_string("bind"),
        "port": parser.get_int("port"),
        "verbose": parser.get_bool("verbose"),
    })
