import argparse
import sys

from tensorlayerx import logging

from zoopredict.config import InferConfig, RunnerConfig
from zoopredict.runner import Runner


def build_config(args):
    if args.config:
        runner_config = RunnerConfig.from_pretrained(args.config)
    else:
        runner_config = RunnerConfig()

    if args.model is not None:
        runner_config.zoo_config.model_type = args.model
    if args.cache_dir is not None:
        runner_config.zoo_config.cache_dir = args.cache_dir
    if args.no_download:
        runner_config.zoo_config.download = False

    infer_overrides = {key: value for key, value in (("resource_dir", args.resource_dir),
                                                    ("num_images", args.num_images),
                                                    ("top_k", args.top_k)) if value is not None}
    if infer_overrides:
        infer_dict = runner_config.infer_config.to_dict()
        infer_dict.update(infer_overrides)
        # constructor checks the bounds
        runner_config.infer_config = InferConfig.from_dict(infer_dict)
    return runner_config


def run(args):
    if args.verbose:
        logging.set_verbosity(logging.DEBUG)

    runner_config = build_config(args)

    if args.save_dir:
        runner_config.save_pretrained(args.save_dir)

    return Runner(runner_config).run()


def _get_augment_parser():
    parser = argparse.ArgumentParser(
        description="Predict ImageNet classes of sample images with a pretrained model zoo network.",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter
    )
    parser.add_argument(
        "--config", help="Directory of saved runner configs."
    )

    parser.add_argument(
        "--model", help="Model zoo name, e.g. VGG-16 or VGG-19."
    )

    parser.add_argument(
        "--cache_dir", help="Directory for pretrained weights and labels."
    )

    parser.add_argument(
        "--no_download",
        default=False,
        action="store_true",
        help="fail instead of downloading missing weights or labels.",
    )

    parser.add_argument(
        "--resource_dir", help="Directory the sample image names are resolved against."
    )

    parser.add_argument(
        "--num_images",
        type=int,
        help="number of sample images image1..imageN.",
    )

    parser.add_argument(
        "--top_k",
        type=int,
        help="number of ranked labels printed per image.",
    )

    parser.add_argument(
        "--save_dir", help="Save the resolved configs to this directory."
    )

    parser.add_argument(
        "--verbose",
        default=False,
        action="store_true",
        help="log every loaded weight array.",
    )

    return parser


def main(argv=None):
    parser = _get_augment_parser()
    args = sys.argv[1:] if argv is None else argv
    args = parser.parse_args(args)
    run(args)


if __name__ == '__main__':
    main()
